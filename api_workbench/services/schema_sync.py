"""
Merging a re-fetched service definition into an existing Interface.

Operations are keyed by name. Saved requests belong to the user and are
kept for every operation that survives the diff; only schema-derived
attributes are replaced.
"""

import logging

from ..exceptions import EntityNotFoundError
from ..models import EntityKind, Interface, Operation, Project, SchemaDiff, ServiceOperation
from .identity import IdentityKey

logger = logging.getLogger(__name__)


def _schema_fields(service_op: ServiceOperation) -> dict:
    return {
        "action": service_op.action,
        "input": service_op.input,
        "target_namespace": service_op.target_namespace,
        "original_endpoint": service_op.original_endpoint,
    }


def merge_operations(interface: Interface, diff: SchemaDiff) -> Interface:
    """
    Return a copy of ``interface`` with ``diff`` applied.

    - Removed names drop the operation and its requests.
    - Changed operations get new schema attributes, keeping id and requests.
    - Added operations start with no requests; an added name that already
      exists is treated as a change.
    Untouched operations are shared with the input.
    """
    removed = set(diff.removed_operation_names)
    updates: dict[str, ServiceOperation] = {op.name: op for op in diff.changed_operations}
    additions: list[ServiceOperation] = []
    existing_names = {op.name for op in interface.operations if op.name not in removed}
    for service_op in diff.added_operations:
        if service_op.name in existing_names:
            updates.setdefault(service_op.name, service_op)
        else:
            additions.append(service_op)
            existing_names.add(service_op.name)

    operations: list[Operation] = []
    for operation in interface.operations:
        if operation.name in removed:
            logger.info("Removing operation %r with %d saved request(s) from %r",
                        operation.name, len(operation.requests), interface.name)
            continue
        service_op = updates.get(operation.name)
        if service_op is not None:
            operation = operation.model_copy(update=_schema_fields(service_op))
        operations.append(operation)

    for service_op in additions:
        operations.append(Operation(name=service_op.name, **_schema_fields(service_op)))

    update = {"operations": operations}
    if diff.new_definition_source:
        update["definition_source"] = diff.new_definition_source
    return interface.model_copy(update=update)


def apply_schema_diff(tree: Project, interface_id: str, diff: SchemaDiff) -> Project:
    """
    Apply ``diff`` to the interface identified by ``interface_id``.

    The interface is matched by id when it has one, else by name.

    Raises:
        EntityNotFoundError: No interface of the project matches.
    """
    for index, interface in enumerate(tree.interfaces):
        if IdentityKey.of(interface).matches(interface_id) is not None:
            interfaces = list(tree.interfaces)
            interfaces[index] = merge_operations(interface, diff)
            return tree.model_copy(update={"interfaces": interfaces})
    raise EntityNotFoundError(EntityKind.INTERFACE.value, interface_id)
