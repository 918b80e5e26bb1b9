"""
Revive Adserver XML-RPC adapter

This package contains the layers of the Revive client, leaf first:

- errors: Structured exception hierarchy and the auth-failure signature
- normalizer: Wire <-> domain record conversion
- transport: One XML-RPC round trip over HTTP
- session: Logon/logoff and session expiry
- dispatcher: Session injection and the retry-once policy
- client: Domain operations returning OperationResult
"""
