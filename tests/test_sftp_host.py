"""Tests for the SFTP bootstrap script."""

import shlex

from sftp_host import render_user_data


def render(**overrides):
    params = {
        "bucket_name": "example-sftp-bucket",
        "sftp_user": "chargeruser",
        "password": "s3cret-pass",
        "port": 443,
        "folders": {"firmwares": "ro", "diagnostics": "rw"},
    }
    params.update(overrides)
    return render_user_data(**params)


def test_user_data_is_a_bash_script():
    assert render().startswith("#!/bin/bash\n")


def test_user_data_chroots_sftp_user():
    script = render()
    assert "Match User chargeruser" in script
    assert "ForceCommand internal-sftp" in script
    assert "ChrootDirectory /data/sftp" in script
    assert 'echo "chargeruser:s3cret-pass" | sudo chpasswd' in script


def test_user_data_moves_sshd_port():
    script = render(port=2222)
    assert "s/^#Port 22/Port 2222/" in script


def test_user_data_mounts_folders_with_access_mode():
    script = render()
    assert "sudo s3fs example-sftp-bucket:/firmwares /data/sftp/firmwares" in script
    assert "umask=222" in script.split("sudo s3fs example-sftp-bucket:/firmwares")[1].splitlines()[0]
    assert "umask=002" in script.split("sudo s3fs example-sftp-bucket:/diagnostics")[1].splitlines()[0]
    assert script.count("| sudo tee -a /etc/fstab") == 2


def chpasswd_line(script):
    (line,) = [s for s in script.splitlines() if s.endswith("| sudo chpasswd")]
    return line


def test_password_with_shell_metacharacters_is_quoted():
    password = 'pa$HOME"x`id`\'q'
    line = chpasswd_line(render(password=password))
    assert line.startswith("printf '%s\\n' ")
    assert shlex.split(line)[2] == f"chargeruser:{password}"


def test_user_name_is_quoted():
    script = render(sftp_user="sftp user")
    assert "sudo useradd -s /sbin/nologin 'sftp user'" in script
    assert "uid=$(id -u 'sftp user')" in script
    assert shlex.split(chpasswd_line(script))[2] == "sftp user:s3cret-pass"
