"""aistack - provision and tear down a small AI data stack on AWS.

A single run creates a VPC, an S3 bucket, an internet gateway attached to the VPC,
an S3 gateway endpoint (optionally with a connection notification) routed through
the VPC's main route table, a Secrets Manager secret and a CloudWatch metric alarm,
then deletes the alarm, the secret and the gateway. If any call fails, everything
the run created so far is released, newest first.

Key Components:
    - aws: one handler per AWS service plus the StackHandler that runs the plan
    - config: configuration schema and loading
    - provider: the run ledger model
    - cli: command-line interface

Usage:
    >>> aistack describePlan
    >>> aistack provisionStack -f stack.json
    >>> aistack provisionStack --dry-run --long
"""

__version__ = "0.1.0"
