import click
from eth_utils import is_address, to_checksum_address


class MinInt(click.ParamType):
    """An integer no lower than a floor, e.g. a timeout in seconds."""

    name = "minint"

    def __init__(self, min_value: int):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            number = int(value)
        except (TypeError, ValueError):
            self.fail(f"'{value}' is not an integer", param, ctx)
        if number < self.min_value:
            self.fail(f"{number} is below the minimum of {self.min_value}", param, ctx)
        return number


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        if not is_address(value):
            self.fail(f"'{value}' is not a valid address", param, ctx)
        return to_checksum_address(value)


class RpcEndpoint(click.ParamType):
    name = "rpc_endpoint"

    def convert(self, value, param, ctx):
        if not value.startswith(("http://", "https://")):
            self.fail(f"{value} is not an HTTP(S) JSON-RPC endpoint", param, ctx)
        return value
