"""boto3 binding for the store.

This package centralizes:
- boto3 resource configuration
- retry/backoff policy and botocore error mapping
- the table wrapper used by the async store client

"""
