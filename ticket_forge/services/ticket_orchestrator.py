"""
Hierarchical Jira ticket creation.

Walks a tree of TicketDraft nodes depth-first, creating each ticket through a
``CreateItem`` collaborator and threading the keys Jira assigns down to the
children that need them:

- Children of an Epic are linked to it (epic context), as are all of that
  Epic's descendants, unless a descendant is itself an Epic.
- Sub-tasks are linked to their immediate parent (parent context).

A ticket that fails to create takes its whole subtree with it, but unrelated
branches carry on. Failures are collected, never raised.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from ticket_forge.models.enums import CreationStatus, TicketKind
from ticket_forge.models.results import AggregateResult, CreatedItem, CreatedTicket, NodeOutcome
from ticket_forge.models.ticket import TicketDraft

logger = logging.getLogger(__name__)

SUMMARY_PREVIEW_CHARS = 30


class CreateItem(Protocol):
    """Creates one ticket in the tracker; raises with a readable message on failure."""

    def __call__(
        self,
        kind: TicketKind,
        summary: str,
        description: Union[str, Dict[str, Any]],
        parent_key: Optional[str] = None,
        epic_key: Optional[str] = None,
        acceptance_criteria: Optional[str] = None,
    ) -> CreatedItem:
        ...


class MissingParentError(Exception):
    """Raised when a Sub-task has no parent ticket to attach to."""
    pass


def _preview(summary: str) -> str:
    if len(summary) <= SUMMARY_PREVIEW_CHARS:
        return summary
    return summary[:SUMMARY_PREVIEW_CHARS] + "..."


def format_node_error(draft: TicketDraft, error: Union[Exception, str]) -> str:
    """Human-readable failure line naming the ticket kind and summary."""
    return f'{draft.type.value} "{_preview(draft.summary)}": {error}'


class TicketHierarchyOrchestrator:
    """Creates a draft ticket tree parent-first and reports the aggregate outcome."""

    def __init__(
        self,
        create_item: CreateItem,
        on_outcome: Optional[Callable[[NodeOutcome], None]] = None
    ):
        """
        Initialize orchestrator.

        Args:
            create_item: Collaborator that creates one ticket in the tracker
            on_outcome: Optional callback invoked as each node is resolved.
                Exceptions it raises propagate out of ``create``.
        """
        self.create_item = create_item
        self.on_outcome = on_outcome

    def create(self, roots: Sequence[TicketDraft]) -> AggregateResult:
        """
        Create every ticket in the draft forest.

        Args:
            roots: Top-level draft tickets

        Returns:
            AggregateResult distinguishing full, partial and total failure

        Raises:
            TypeError: If the input is not a sequence of TicketDraft
        """
        roots = list(roots)
        for root in roots:
            if not isinstance(root, TicketDraft):
                raise TypeError(f"Expected TicketDraft, got {type(root).__name__}")

        if not roots:
            return AggregateResult(
                success=True,
                message="Nothing to create: no tickets were provided.",
                created_tickets=[],
            )

        outcomes: List[NodeOutcome] = []
        for index, root in enumerate(roots):
            self._create_node(root, (index,), parent_key=None, epic_key=None, outcomes=outcomes)

        return self._aggregate(outcomes)

    def _create_node(
        self,
        draft: TicketDraft,
        path: Tuple[int, ...],
        parent_key: Optional[str],
        epic_key: Optional[str],
        outcomes: List[NodeOutcome],
    ) -> None:
        try:
            if draft.type == TicketKind.SUB_TASK and not parent_key:
                raise MissingParentError("Sub-task has no parent ticket to attach to")
            created = CreatedItem.model_validate(self.create_item(
                draft.type,
                draft.summary,
                draft.description,
                parent_key=parent_key,
                epic_key=epic_key,
                acceptance_criteria=draft.acceptance_criteria if draft.type.accepts_acceptance_criteria else None,
            ))
        except Exception as e:
            error = format_node_error(draft, e)
            logger.warning(f"Failed to create {error}")
            self._record(outcomes, NodeOutcome(
                path=path,
                kind=draft.type,
                summary=draft.summary,
                status=CreationStatus.FAILED,
                error=error,
            ))
            self._skip_children(draft, path, outcomes)
            return

        logger.info(f"Created {draft.type.value} {created.key} ({_preview(draft.summary)})")
        self._record(outcomes, NodeOutcome(
            path=path,
            kind=draft.type,
            summary=draft.summary,
            status=CreationStatus.CREATED,
            key=created.key,
            id=created.id,
        ))

        child_epic_key = created.key if draft.type == TicketKind.EPIC else epic_key
        for index, child in enumerate(draft.children):
            self._create_node(
                child,
                path + (index,),
                parent_key=created.key if child.type == TicketKind.SUB_TASK else None,
                epic_key=None if child.type == TicketKind.EPIC else child_epic_key,
                outcomes=outcomes,
            )

    def _skip_children(self, draft: TicketDraft, path: Tuple[int, ...], outcomes: List[NodeOutcome]) -> None:
        for index, child in enumerate(draft.children):
            child_path = path + (index,)
            self._record(outcomes, NodeOutcome(
                path=child_path,
                kind=child.type,
                summary=child.summary,
                status=CreationStatus.SKIPPED,
            ))
            self._skip_children(child, child_path, outcomes)
        if draft.children:
            logger.warning(
                f"Skipped {draft.count() - 1} ticket(s) under failed "
                f"{draft.type.value} ({_preview(draft.summary)})"
            )

    def _record(self, outcomes: List[NodeOutcome], outcome: NodeOutcome) -> None:
        outcomes.append(outcome)
        if self.on_outcome:
            self.on_outcome(outcome)

    @staticmethod
    def _aggregate(outcomes: List[NodeOutcome]) -> AggregateResult:
        created = [o for o in outcomes if o.status == CreationStatus.CREATED]
        errors = [o.error for o in outcomes if o.status == CreationStatus.FAILED]
        skipped_count = sum(1 for o in outcomes if o.status == CreationStatus.SKIPPED)
        created_tickets = [CreatedTicket(key=o.key, summary=o.summary, type=o.kind) for o in created]

        if not errors:
            message = f"Successfully created {len(created)} ticket(s) in Jira."
        elif created:
            message = (
                f"Created {len(created)} ticket(s), but {len(errors)} failed: "
                + "; ".join(errors)
            )
        else:
            message = "Failed to create any tickets. Errors: " + "; ".join(errors)

        if skipped_count:
            message += f" ({skipped_count} dependent ticket(s) skipped.)"

        return AggregateResult(
            success=not errors,
            message=message,
            created_tickets=created_tickets,
            outcomes=outcomes,
        )


def create_ticket_hierarchy(roots: Sequence[TicketDraft], create_item: CreateItem) -> AggregateResult:
    """Create a draft ticket forest with the given collaborator."""
    return TicketHierarchyOrchestrator(create_item).create(roots)
