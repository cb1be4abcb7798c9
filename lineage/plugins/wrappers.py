"""
ContractedMethod - validating proxy around an instance method.

The wrapper owns the original callable and exposes the same call surface.
It is installed as an own property of one instance; the shared member
table and sibling instances are left untouched.

Arguments are checked by parameter position, whether they were passed
positionally or by keyword. A parameter the caller left out is not
checked. An explicit ``None`` skips the entry hint but is still handed to
the validator, so validators for optional parameters must accept ``None``.
"""

from __future__ import annotations

import functools
import inspect
from typing import Any, List, Optional

from ..blueprint import MethodContract
from ..faults import RangeViolationError, ReturnTypeMismatchError, TypeMismatchError
from ..hints import describe_hint, hint_requirement, matches

_ABSENT = object()

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _signature_of(original: Any) -> Optional[inspect.Signature]:
    try:
        return inspect.signature(original)
    except (TypeError, ValueError):
        return None


class ContractedMethod:
    """
    Callable proxy enforcing a :class:`MethodContract`.

    Per call, for each parameter position in order:
      1. entry hint (skipped when the argument is ``None``)
      2. validator
    then the original is invoked and its return value checked against the
    exit hint. Keyword-only parameters and ``**kwargs`` are unchecked.
    """

    def __init__(self, name: str, original: Any, contract: MethodContract, *, source: str = "contract"):
        functools.update_wrapper(self, original)
        self.name = name
        self.original = original
        self.contract = contract
        self.source = source
        self._signature = _signature_of(original)

    def positional_values(self, args: tuple, kwargs: dict) -> List[Any]:
        """
        Arguments laid out by parameter position; omitted ones are absent.

        Callables without an introspectable signature, and calls that do
        not bind, fall back to the positional arguments as given.
        """
        if self._signature is None:
            return list(args)
        try:
            bound = self._signature.bind(*args, **kwargs)
        except TypeError:
            # The original raises its own error for a call that cannot bind
            return list(args)

        values: List[Any] = []
        for param in self._signature.parameters.values():
            if param.kind in _POSITIONAL:
                values.append(bound.arguments.get(param.name, _ABSENT))
            elif param.kind is inspect.Parameter.VAR_POSITIONAL:
                values.extend(bound.arguments.get(param.name, ()))
            else:
                break
        return values

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        on_entry = self.contract.on_entry
        validators = self.contract.validators

        for index, arg in enumerate(self.positional_values(args, kwargs)):
            if arg is _ABSENT:
                continue
            if index < len(on_entry):
                hint = on_entry[index]
                if hint is not None and arg is not None and not matches(arg, hint):
                    raise TypeMismatchError(
                        self.name,
                        index + 1,
                        describe_hint(hint),
                        hint_requirement(hint),
                        source=self.source,
                    )
            if index < len(validators):
                validator = validators[index]
                if validator is not None and not validator(arg):
                    raise RangeViolationError(self.name, index + 1)

        result = self.original(*args, **kwargs)

        on_exit = self.contract.on_exit
        if on_exit is not None and not matches(result, on_exit):
            raise ReturnTypeMismatchError(
                self.name, describe_hint(on_exit), hint_requirement(on_exit)
            )
        return result

    def __repr__(self) -> str:
        return f"<ContractedMethod {self.name!r} ({self.source})>"
