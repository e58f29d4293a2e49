# backend/taskboard/services/recurrence/mirror_resolver.py
"""
Mirror Graph Resolver - finds the copies of a task that must reset with it.

A task's mirror class is the task itself, the task its mirror_task_id points
at, and every task whose mirror_task_id points at it. Only direct links are
followed; a mirror of a mirror is not part of the class.
"""

from typing import List, Set

from ...database.task_operations import TaskOperations
from ...models.task_model import Task


class MirrorGraphResolver:
    """Resolves depth-1 mirror classes through the task store."""

    def __init__(self, task_ops: TaskOperations):
        self.task_ops = task_ops

    async def resolve_class(self, task: Task) -> Set[str]:
        """
        Ids of the task's mirrors, excluding the task itself.

        Raises:
            TaskOperationError: If the reverse lookup fails
        """
        members: Set[str] = set()
        if task.mirror_task_id and task.mirror_task_id != task.id:
            members.add(task.mirror_task_id)

        reverse_ids: List[str] = await self.task_ops.get_reverse_mirror_ids(task.id)
        members.update(reverse_ids)
        members.discard(task.id)
        return members

    async def resolve_class_by_id(self, task_id: str) -> Set[str]:
        """Same as resolve_class after a point read; unknown ids have no mirrors."""
        task = await self.task_ops.get_task_by_id(task_id)
        if task is None:
            return set()
        return await self.resolve_class(task)
