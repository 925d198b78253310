"""
Operation
=========

The invocation surface of one named operation:

    graph()                       every legal move (DirectedEntry)
    can_apply_to(specs)           some move starts at an equivalent solid
    apply(forme, options)         OpResult (animation data + aligned result)
    has_options(specs)            more than one move from this solid
    all_option_combos(forme)      every concrete options dict
    get_all_apply_args(forme)     the combos the operation accepts
    hit_option / get_hit_option   which option a 3-D pick point selects
    get_result_specs(forme, opts) the solid the move produces

Option enumeration is pluggable (OptionArgs): prism operations list the
distinct graph options; cut-and-paste operations list faces or caps.
"""

from typing import Dict, Iterable, List, Optional

from solid_core.spec.errors import NoApplicableOperationError, NoMatchingTransitionError
from .op_pair import CombinedOp, OpInput, OpResult, combine_ops


class OptionArgs:
    """Options taken straight from the graph entries."""

    hit_option: Optional[str] = None

    def has_options(self, op: "Operation", specs) -> bool:
        return len(self._distinct(op, specs)) > 1

    def all_option_combos(self, op: "Operation", forme) -> Iterable[Dict]:
        return self._distinct(op, forme.specs)

    def get_hit_option(self, op: "Operation", forme, point) -> Dict:
        return {}

    @staticmethod
    def _distinct(op: "Operation", specs) -> List[Dict]:
        seen = []
        for entry in op.graph():
            if entry.start.equivalent(specs) and entry.options not in seen:
                seen.append(dict(entry.options))
        return seen


class Operation:

    def __init__(self, name: str, op_input: OpInput, option_args: Optional[OptionArgs] = None):
        self.name = name
        self.op_input = op_input if isinstance(op_input, CombinedOp) else combine_ops([op_input])
        self.option_args = option_args or OptionArgs()

    def __repr__(self):
        return f"Operation({self.name})"

    def graph(self):
        return self.op_input.graph()

    def can_apply_to(self, specs) -> bool:
        return any(entry.start.equivalent(specs) for entry in self.graph())

    def apply(self, forme, options: Optional[dict] = None) -> OpResult:
        if not self.can_apply_to(forme.specs):
            raise NoApplicableOperationError(f"Cannot {self.name} {forme.specs.name()}")
        return self.op_input.apply(forme, options or {})

    def get_result_specs(self, forme, options: Optional[dict] = None):
        return self.op_input.get_result_specs(forme, options or {})

    def accepts(self, forme, options: Optional[dict] = None) -> bool:
        """True if apply(forme, options) would find a move."""
        try:
            self.get_result_specs(forme, options)
        except (NoApplicableOperationError, NoMatchingTransitionError):
            return False
        return True

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def has_options(self, specs) -> bool:
        return self.option_args.has_options(self, specs)

    def all_option_combos(self, forme) -> List[Dict]:
        return list(self.option_args.all_option_combos(self, forme))

    def get_all_apply_args(self, forme) -> List[Dict]:
        return [opts for opts in self.all_option_combos(forme) if self.accepts(forme, opts)]

    @property
    def hit_option(self) -> Optional[str]:
        return self.option_args.hit_option

    def get_hit_option(self, forme, point) -> Dict:
        return self.option_args.get_hit_option(self, forme, point)
