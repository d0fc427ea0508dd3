"""
ekstester/config/regions.py

Known AWS regions, mapped to the airport code used as their short name.
A region outside this table is rejected by the resolver.
"""

from typing import Dict

REGION_TO_AIRPORT: Dict[str, str] = {
    "ap-east-1": "hkg",
    "ap-northeast-1": "nrt",
    "ap-northeast-2": "icn",
    "ap-northeast-3": "kix",
    "ap-south-1": "bom",
    "ap-southeast-1": "sin",
    "ap-southeast-2": "syd",
    "ca-central-1": "yul",
    "cn-north-1": "bjs",
    "cn-northwest-1": "zhy",
    "eu-central-1": "fra",
    "eu-north-1": "arn",
    "eu-west-1": "dub",
    "eu-west-2": "lhr",
    "eu-west-3": "cdg",
    "me-south-1": "bah",
    "sa-east-1": "gru",
    "us-east-1": "iad",
    "us-east-2": "cmh",
    "us-gov-east-1": "osu",
    "us-gov-west-1": "pdt",
    "us-west-1": "sfo",
    "us-west-2": "pdx",
}


def is_known_region(region: str) -> bool:
    """Return True if `region` is in the known-region table."""
    return region in REGION_TO_AIRPORT
