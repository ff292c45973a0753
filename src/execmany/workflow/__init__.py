"""The execute-many workflow step.

- selector: which elements the step runs on
- reconciler: folding job results back into the package
- properties: property-file merging
- operation: the step itself and its collaborator context
"""

from execmany.workflow.operation import (
    DESCRIPTION,
    OPERATION_ID,
    ExecuteManyOperation,
    OperationContext,
)
from execmany.workflow.properties import (
    load_properties,
    merge_property_file,
    parse_properties,
)
from execmany.workflow.reconciler import (
    apply_tag_rewrites,
    collect_results,
    inspect_tracks,
    reconcile_items,
    resolve_target_flavor,
)
from execmany.workflow.results import AggregatedResult, StepFailure, StepResult
from execmany.workflow.selector import (
    SelectionCriteria,
    matches_element,
    select_elements,
)

__all__ = [
    "DESCRIPTION",
    "OPERATION_ID",
    "ExecuteManyOperation",
    "OperationContext",
    "AggregatedResult",
    "StepFailure",
    "StepResult",
    "SelectionCriteria",
    "matches_element",
    "select_elements",
    "apply_tag_rewrites",
    "collect_results",
    "inspect_tracks",
    "reconcile_items",
    "resolve_target_flavor",
    "load_properties",
    "merge_property_file",
    "parse_properties",
]
