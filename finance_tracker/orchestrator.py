"""
Main Orchestrator for Finance Tracker

This module owns the user's records for one session and defines the
flows around them:
1. Session start (load → roll recurring budgets forward)
2. Mutations (apply in memory → persist → audit)
3. Derived views (recomputed from the current records on every call)

DESIGN DECISION: The in-memory collections are authoritative. A failed
save is audited and the mutation stands; the collection is listed in
unsaved_collections until the next successful save writes it again.

Recurring budgets are rolled into the current month once, when the
session opens. A session that runs across a month boundary keeps its
budgets as they were until roll_recurring_budgets() is called again
(re-running is always safe).
"""

from pathlib import Path
from typing import Optional

from finance_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from finance_tracker.config import get_settings
from finance_tracker.engine import (
    UNCATEGORIZED,
    budget_overview,
    dashboard_summary,
    goal_chart_series,
    project_goal,
    roll_recurring_budgets,
    top_goals,
)
from finance_tracker.models.derived import (
    BudgetOverview,
    DashboardSummary,
    GoalChartPoint,
    GoalProgress,
    GoalProjection,
)
from finance_tracker.models.query import TransactionListResult, TransactionQuery
from finance_tracker.models.records import Budget, Goal, Period, Transaction
from finance_tracker.queries import TransactionQueryExecutor
from finance_tracker.services.clock import Clock, SystemClock
from finance_tracker.services.ids import IdGenerator, generate_id
from finance_tracker.services.profiles import ProfileService
from finance_tracker.services.storage import (
    BUDGETS,
    GOALS,
    TRANSACTIONS,
    CollectionRepository,
    InMemoryStore,
    JsonFileStore,
    KeyValueAuditStorage,
    KeyValueStore,
    NotFoundError,
    StorageError,
)


class FinanceTracker:
    """
    Root state of one user's finances.

    Holds the transactions, budgets and goals, applies every mutation,
    persists after each one and answers the derived-view queries.

    Snapshots returned by the collection properties are tuples; callers
    change records only through the mutation methods.
    """

    def __init__(
        self,
        repository: CollectionRepository,
        clock: Optional[Clock] = None,
        id_generator: IdGenerator = generate_id,
        audit_logger: Optional[AuditLogger] = None,
        uncategorized: str = UNCATEGORIZED,
    ):
        self._repository = repository
        self._clock = clock or SystemClock()
        self._id_generator = id_generator
        self._audit_logger = audit_logger or AuditLogger(user_id=repository.user_id)
        self._uncategorized = uncategorized
        self._query_executor = TransactionQueryExecutor(uncategorized)

        self._transactions: list[Transaction] = []
        self._budgets: list[Budget] = []
        self._goals: list[Goal] = []
        self._unsaved: set[str] = set()
        self._is_open = False

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def user_id(self) -> Optional[str]:
        return self._repository.user_id

    def today(self):
        return self._clock.today()

    def current_period(self) -> Period:
        """The real calendar month, independent of what is on screen."""
        return Period.from_date(self._clock.today())

    def open(self) -> list[Budget]:
        """
        Load the stored collections and roll recurring budgets forward.

        Opening an already open session does nothing.

        Returns:
            Budgets created by the rollover (empty if none were needed)
        """
        if self._is_open:
            return []

        self._transactions = self._repository.load_transactions()
        self._budgets = self._repository.load_budgets()
        self._goals = self._repository.load_goals()
        self._is_open = True

        self._audit_logger.log_data_loaded({
            TRANSACTIONS: len(self._transactions),
            BUDGETS: len(self._budgets),
            GOALS: len(self._goals),
        })

        return self.roll_recurring_budgets()

    def roll_recurring_budgets(self) -> list[Budget]:
        """
        Copy recurring budgets into the current month where missing.

        Returns:
            The budgets that were created
        """
        created = roll_recurring_budgets(
            self._budgets,
            self._clock.today(),
            self._id_generator,
        )
        if not created:
            return []

        sources = [
            budget for budget in self._budgets
            if budget.is_recurring and budget.period != self.current_period()
        ]
        self._budgets.extend(created)
        self._persist(BUDGETS)

        correlation_id = create_correlation_id()
        label = self.current_period().label()
        for budget in created:
            source = next(
                s for s in sources
                if s.category == budget.category and s.type == budget.type
            )
            self._audit_logger.log_budget_rolled_over(
                budget_id=budget.id,
                source_id=source.id,
                category=budget.category,
                period_label=label,
                correlation_id=correlation_id,
            )
        return created

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return tuple(self._budgets)

    @property
    def goals(self) -> tuple[Goal, ...]:
        return tuple(self._goals)

    @property
    def unsaved_collections(self) -> tuple[str, ...]:
        """Collections whose latest change could not be written to the store."""
        return tuple(sorted(self._unsaved))

    def _persist(self, collection: str) -> None:
        """
        Save one collection.

        A rejected write is audited and marks the collection unsaved.
        """
        try:
            if collection == TRANSACTIONS:
                self._repository.save_transactions(self._transactions)
            elif collection == BUDGETS:
                self._repository.save_budgets(self._budgets)
            else:
                self._repository.save_goals(self._goals)
        except StorageError as e:
            self._unsaved.add(collection)
            self._audit_logger.log_save_failed(collection, str(e))
            return
        self._unsaved.discard(collection)

    @staticmethod
    def _index_of(records: list, record_id: str) -> Optional[int]:
        for index, record in enumerate(records):
            if record.id == record_id:
                return index
        return None

    @staticmethod
    def _changes(old, new) -> dict:
        before = old.model_dump(mode="json")
        after = new.model_dump(mode="json")
        return {key: value for key, value in after.items() if before.get(key) != value}

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a transaction. Transactions are never edited afterwards."""
        self._transactions.append(transaction)
        self._persist(TRANSACTIONS)
        self._audit_logger.log_record_added(
            "transaction",
            transaction.id,
            f"{transaction.type.value} {transaction.amount} ({transaction.category or self._uncategorized})",
        )
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction by id. Returns False if it didn't exist."""
        index = self._index_of(self._transactions, transaction_id)
        if index is None:
            return False
        del self._transactions[index]
        self._persist(TRANSACTIONS)
        self._audit_logger.log_record_deleted("transaction", transaction_id)
        return True

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------

    def add_budget(self, budget: Budget) -> Budget:
        self._budgets.append(budget)
        self._persist(BUDGETS)
        self._audit_logger.log_record_added(
            "budget",
            budget.id,
            f"{budget.category} {budget.type.value} {budget.amount} for {budget.period.label()}",
        )
        return budget

    def update_budget(self, budget: Budget) -> Budget:
        """
        Replace the stored budget that has the same id.

        Raises:
            NotFoundError: If no budget has this id
        """
        index = self._index_of(self._budgets, budget.id)
        if index is None:
            raise NotFoundError(f"Budget not found: {budget.id}")
        changes = self._changes(self._budgets[index], budget)
        self._budgets[index] = budget
        self._persist(BUDGETS)
        self._audit_logger.log_record_updated("budget", budget.id, changes)
        return budget

    def delete_budget(self, budget_id: str) -> bool:
        index = self._index_of(self._budgets, budget_id)
        if index is None:
            return False
        del self._budgets[index]
        self._persist(BUDGETS)
        self._audit_logger.log_record_deleted("budget", budget_id)
        return True

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def add_goal(self, goal: Goal) -> Goal:
        self._goals.append(goal)
        self._persist(GOALS)
        self._audit_logger.log_record_added("goal", goal.id, f"{goal.title} ({goal.target})")
        return goal

    def update_goal(self, goal: Goal) -> Goal:
        """
        Replace the stored goal that has the same id.

        Raises:
            NotFoundError: If no goal has this id
        """
        index = self._index_of(self._goals, goal.id)
        if index is None:
            raise NotFoundError(f"Goal not found: {goal.id}")
        changes = self._changes(self._goals[index], goal)
        self._goals[index] = goal
        self._persist(GOALS)
        self._audit_logger.log_record_updated("goal", goal.id, changes)
        return goal

    def delete_goal(self, goal_id: str) -> bool:
        index = self._index_of(self._goals, goal_id)
        if index is None:
            return False
        del self._goals[index]
        self._persist(GOALS)
        self._audit_logger.log_record_deleted("goal", goal_id)
        return True

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def budget_overview(self, period: Optional[Period] = None) -> BudgetOverview:
        """Budget figures for ``period`` (default: the current month)."""
        return budget_overview(
            self._transactions,
            self._budgets,
            period or self.current_period(),
            self._uncategorized,
        )

    def dashboard(self, period: Optional[Period] = None) -> DashboardSummary:
        """Dashboard totals for ``period`` (default: the current month)."""
        return dashboard_summary(
            self._transactions,
            period or self.current_period(),
            budgets=self._budgets,
            uncategorized=self._uncategorized,
        )

    def goal_projections(self) -> list[GoalProjection]:
        today = self._clock.today()
        return [project_goal(goal, today) for goal in self._goals]

    def goal_chart(self) -> list[GoalChartPoint]:
        return goal_chart_series(self._goals, self._clock.today())

    def top_goals(self, limit: int = 3) -> list[GoalProgress]:
        return top_goals(self._goals, limit)

    def search_transactions(
        self,
        query: Optional[TransactionQuery] = None,
    ) -> TransactionListResult:
        """List transactions matching ``query`` with their budget status."""
        return self._query_executor.execute(
            query or TransactionQuery(),
            self._transactions,
            self._budgets,
        )


def build_store(backend: str = "json", data_dir: Optional[Path] = None) -> KeyValueStore:
    """Create the key-value store named by ``backend``."""
    if backend == "memory":
        return InMemoryStore()
    if backend == "json":
        return JsonFileStore(data_dir or Path("data"))
    raise ValueError(f"Unknown storage backend: {backend}")


def create_tracker(
    store: KeyValueStore,
    user_id: Optional[str] = None,
    clock: Optional[Clock] = None,
    audit_logger: Optional[AuditLogger] = None,
    id_generator: IdGenerator = generate_id,
    uncategorized: str = UNCATEGORIZED,
) -> FinanceTracker:
    """
    Build an opened tracker for one user's namespace.

    The rollover has already run when this returns.
    """
    user_audit = (audit_logger or AuditLogger()).for_user(user_id)
    repository = CollectionRepository(store, user_id=user_id, audit_logger=user_audit)
    tracker = FinanceTracker(
        repository,
        clock=clock,
        id_generator=id_generator,
        audit_logger=user_audit,
        uncategorized=uncategorized,
    )
    tracker.open()
    return tracker


def create_app_components() -> tuple[ProfileService, KeyValueStore, AuditLogger]:
    """
    Factory function to create the shared application components.

    Trackers are per user; build them with create_tracker() once a
    profile is selected.

    Returns:
        (profile_service, store, audit_logger)
    """
    settings = get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)

    store = build_store(storage_settings.backend, storage_settings.data_dir)
    audit_logger = AuditLogger(
        KeyValueAuditStorage(store, limit=app_settings.audit_history_limit)
    )
    profiles = ProfileService(
        store,
        audit_logger=audit_logger,
        default_currency=app_settings.default_currency,
    )
    return profiles, store, audit_logger
