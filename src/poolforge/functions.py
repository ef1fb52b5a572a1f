from collections.abc import Sequence
from typing import Any

import eth_abi.abi
from eth_utils.crypto import keccak


def encode_function_calldata(
    function_prototype: str, function_arguments: Sequence[Any] | None
) -> bytes:
    """
    Encode the calldata to execute a call to the given function prototype, with ordered arguments.
    The resulting bytes array will include the 4-byte function selector, followed by the
    ABI-encoded arguments.
    """

    if function_arguments is None:
        function_arguments = ()

    return keccak(text=function_prototype)[:4] + eth_abi.abi.encode(
        types=extract_argument_types_from_function_prototype(function_prototype),
        args=function_arguments,
    )


def extract_argument_types_from_function_prototype(function_prototype: str) -> list[str]:
    """
    Extract the argument types from the function prototype.

    e.g. the argument types for the prototype 'function(address,uint256)' are ['address','uint256']
    """

    if function_args := function_prototype[
        function_prototype.find("(") + 1 : function_prototype.find(")") :
    ]:
        return function_args.split(",")

    return []


def event_signature(event_abi: dict[str, Any]) -> str:
    """
    Build the canonical signature for an event ABI entry, e.g. 'Transfer(address,address,uint256)'
    """

    return f"{event_abi['name']}({','.join(item['type'] for item in event_abi['inputs'])})"


def event_topic(event_abi: dict[str, Any]) -> bytes:
    return keccak(text=event_signature(event_abi))
