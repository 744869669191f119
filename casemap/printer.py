from __future__ import annotations

from typing import Iterable

from .model import ConversionCandidate, ConversionPlan, DestinationVariant
from .parser.ast import FieldShape


def format_variant(dest: DestinationVariant) -> str:
    if dest.shape is FieldShape.UNIT:
        return dest.name
    if dest.shape is FieldShape.NAMED:
        fields = ", ".join(f"{f.name}: {f.type_name}" for f in dest.fields)
        return f"{dest.name} {{ {fields} }}"
    fields = ", ".join(f.type_name for f in dest.fields)
    return f"{dest.name}({fields})"


def format_candidates(candidates: list[ConversionCandidate]) -> str:
    mode = "try" if len(candidates) > 1 else "into"
    targets = " | ".join(f"#{c.dest.index} {format_variant(c.dest)}" for c in candidates)
    return f"{mode} {targets}"


def format_plan(plan: ConversionPlan) -> str:
    model = plan.model
    header = f"dest {model.dest} <- {', '.join(model.sources)}"
    if model.effect_container:
        header += f" with {model.effect_container}"
    lines = [header + " {"]
    for src, by_case in plan.table.items():
        lines.append(f"  {src}:")
        for case_name, candidates in by_case.items():
            lines.append(f"    {case_name} => {format_candidates(candidates)}")
    lines.append("}")
    return "\n".join(lines)


def format_plans(plans: Iterable[ConversionPlan]) -> str:
    return "\n\n".join(format_plan(p) for p in plans) + "\n"


__all__ = ["format_variant", "format_candidates", "format_plan", "format_plans"]
