"""
AWS caller identity lookup.
"""

import boto3


def get_account_id(session: boto3.Session) -> str:
    """Get the AWS account ID of the session's credentials."""
    response = session.client("sts").get_caller_identity()
    return str(response["Account"])
