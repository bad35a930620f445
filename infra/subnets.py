"""
Public subnet discovery.
Classifies the subnets of a VPC as public when their effective route table
routes to an internet gateway.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

INTERNET_GATEWAY_PREFIX = "igw-"


class SubnetInventoryError(LookupError):
    """Base class for subnet inventory failures."""


class RouteTableNotFoundError(SubnetInventoryError):
    """No route table matched the lookup filters."""


class InventoryLookupError(SubnetInventoryError):
    """The EC2 API call itself failed."""


class NoPublicSubnetError(SubnetInventoryError):
    """The VPC has no subnet routed to an internet gateway."""


@dataclass(frozen=True)
class Route:
    destination_cidr: Optional[str] = None
    gateway_id: Optional[str] = None

    @property
    def is_internet_gateway(self) -> bool:
        return bool(self.gateway_id) and self.gateway_id.startswith(INTERNET_GATEWAY_PREFIX)


@dataclass(frozen=True)
class RouteTable:
    route_table_id: str
    main: bool = False
    routes: Tuple[Route, ...] = ()

    def has_internet_gateway(self) -> bool:
        return any(route.is_internet_gateway for route in self.routes)

    @classmethod
    def from_api(cls, data: dict) -> "RouteTable":
        """Build a RouteTable from a DescribeRouteTables entry."""
        routes = tuple(
            Route(
                destination_cidr=route.get("DestinationCidrBlock"),
                gateway_id=route.get("GatewayId"),
            )
            for route in data.get("Routes", [])
        )
        main = any(assoc.get("Main", False) for assoc in data.get("Associations", []))
        return cls(route_table_id=data["RouteTableId"], main=main, routes=routes)


class Ec2Inventory:
    """Read-only view of subnets and route tables through the EC2 API."""

    def __init__(self, client=None, region: str = None, timeout: int = 10, profile: str = None):
        if client is None:
            # Same credentials as the Pulumi AWS provider
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client(
                "ec2",
                config=Config(connect_timeout=timeout, read_timeout=timeout),
            )
        self.ec2 = client

    def list_subnet_ids(self, vpc_id: str) -> list:
        """List subnet ids of a VPC in API order."""
        subnet_ids = []
        try:
            paginator = self.ec2.get_paginator("describe_subnets")
            pages = paginator.paginate(Filters=[{"Name": "vpc-id", "Values": [vpc_id]}])
            for page in pages:
                subnet_ids.extend(subnet["SubnetId"] for subnet in page["Subnets"])
        except (BotoCoreError, ClientError) as e:
            raise InventoryLookupError(f"Failed to list subnets of {vpc_id}: {e}") from e
        return subnet_ids

    def get_route_table(self, filters: list) -> RouteTable:
        """
        Fetch the single route table matching the filters.

        Raises RouteTableNotFoundError when nothing matches and
        InventoryLookupError when the API call fails.
        """
        try:
            response = self.ec2.describe_route_tables(Filters=filters)
        except (BotoCoreError, ClientError) as e:
            raise InventoryLookupError(f"Failed to describe route tables: {e}") from e

        tables = response.get("RouteTables", [])
        if not tables:
            raise RouteTableNotFoundError(f"No route table matches {filters}")
        if len(tables) > 1:
            logger.warning(
                "Filters %s matched %d route tables, using %s",
                filters, len(tables), tables[0]["RouteTableId"],
            )
        return RouteTable.from_api(tables[0])

    def subnet_route_table(self, subnet_id: str) -> RouteTable:
        return self.get_route_table(
            [{"Name": "association.subnet-id", "Values": [subnet_id]}]
        )

    def main_route_table(self, vpc_id: str) -> RouteTable:
        return self.get_route_table([
            {"Name": "vpc-id", "Values": [vpc_id]},
            {"Name": "association.main", "Values": ["true"]},
        ])


def effective_route_table(inventory, vpc_id: str, subnet_id: str) -> RouteTable:
    """Explicitly associated route table, else the VPC's main route table."""
    try:
        return inventory.subnet_route_table(subnet_id)
    except RouteTableNotFoundError:
        logger.debug("Subnet %s has no explicit route table, using main table", subnet_id)
        return inventory.main_route_table(vpc_id)


def is_public_subnet(inventory, vpc_id: str, subnet_id: str) -> bool:
    table = effective_route_table(inventory, vpc_id, subnet_id)
    public = table.has_internet_gateway()
    logger.debug(
        "Subnet %s uses %s (%s): %s",
        subnet_id,
        table.route_table_id,
        "main" if table.main else "explicit",
        "public" if public else "private",
    )
    return public


def classify_public_subnets(vpc_id: str, inventory=None, max_workers: int = 1) -> list:
    """
    Return the ids of the publicly routable subnets of a VPC.

    Subnets are returned in the order the inventory lists them. Any lookup
    failure other than a missing explicit association aborts the whole call.
    With max_workers > 1 the per-subnet lookups run on a thread pool.
    """
    if not vpc_id:
        raise ValueError("vpc_id must not be empty")
    if inventory is None:
        inventory = Ec2Inventory()

    subnet_ids = inventory.list_subnet_ids(vpc_id)
    logger.info("Classifying %d subnets in %s", len(subnet_ids), vpc_id)

    if max_workers > 1 and len(subnet_ids) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(subnet_ids))) as pool:
            flags = list(pool.map(lambda s: is_public_subnet(inventory, vpc_id, s), subnet_ids))
    else:
        flags = [is_public_subnet(inventory, vpc_id, s) for s in subnet_ids]

    public = [subnet_id for subnet_id, flag in zip(subnet_ids, flags) if flag]
    logger.info("Found %d public subnets in %s: %s", len(public), vpc_id, public)
    return public


def first_public_subnet(subnet_ids: list) -> str:
    """Pick the placement subnet for the instance."""
    if not subnet_ids:
        raise NoPublicSubnetError("No public subnet available for instance placement")
    return subnet_ids[0]
