"""
Credit Book Module

Stateful owner of credit billing state. Stores each credit's configuration,
record and due detail, serialises refreshes, rejects refreshes that go back in
time and writes every change to the audit trail. The bill computations
themselves are delegated to CreditDueManager.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
import threading

from .audit import AuditTrail, AuditEventType
from .due_manager import CreditDueManager
from .errors import CreditAlreadyExists, CreditNotFound, OutOfOrderRefresh
from .logging_config import get_logger, log_action
from .models import CreditConfig, CreditRecord, DueDetail
from .storage import StorageInterface


@dataclass(frozen=True)
class CreditEntry:
    """Everything the book knows about one credit"""
    credit_id: str
    config: CreditConfig
    record: CreditRecord
    due_detail: DueDetail
    last_refreshed_at: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage"""
        return {
            'credit_id': self.credit_id,
            'config': self.config.to_dict(),
            'record': self.record.to_dict(),
            'due_detail': self.due_detail.to_dict(),
            'last_refreshed_at': self.last_refreshed_at,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CreditEntry':
        """Create instance from dictionary"""
        created_at = data.get('created_at')
        updated_at = data.get('updated_at')
        return cls(
            credit_id=data['credit_id'],
            config=CreditConfig.from_dict(data['config']),
            record=CreditRecord.from_dict(data['record']),
            due_detail=DueDetail.from_dict(data['due_detail']),
            last_refreshed_at=data.get('last_refreshed_at', 0),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )


class CreditBook:
    """
    Manages persisted credits and their bill refreshes
    """

    def __init__(
        self,
        storage: StorageInterface,
        due_manager: CreditDueManager,
        audit_trail: Optional[AuditTrail] = None
    ):
        self.storage = storage
        self.due_manager = due_manager
        self.audit_trail = audit_trail
        self.logger = get_logger("credit_engine.credit_book")

        self.table_name = "credits"
        # Guards load-compute-save so two refreshes of a credit never interleave
        self._lock = threading.RLock()

    def register_credit(
        self,
        credit_id: str,
        config: CreditConfig,
        record: Optional[CreditRecord] = None,
        due_detail: Optional[DueDetail] = None
    ) -> CreditEntry:
        """
        Register a credit with its initial billing state

        Args:
            credit_id: Caller-chosen credit identifier
            config: Credit terms
            record: Initial record; an approved credit with the full term
                remaining when omitted
            due_detail: Initial due detail; all zero when omitted

        Returns:
            Stored CreditEntry

        Raises:
            CreditAlreadyExists: If the ID is taken
        """
        if record is None:
            record = CreditRecord(remaining_periods=config.num_of_periods)
        if due_detail is None:
            due_detail = DueDetail()

        with self._lock:
            if self.storage.exists(self.table_name, credit_id):
                raise CreditAlreadyExists(credit_id)

            now = datetime.now(timezone.utc)
            entry = CreditEntry(
                credit_id=credit_id,
                config=config,
                record=record,
                due_detail=due_detail,
                created_at=now,
                updated_at=now,
            )
            self.storage.save(self.table_name, credit_id, entry.to_dict())

            if self.audit_trail:
                self.audit_trail.log_event(
                    event_type=AuditEventType.CREDIT_REGISTERED,
                    entity_type="credit",
                    entity_id=credit_id,
                    metadata={
                        'config': config.to_dict(),
                        'record': record.to_dict()
                    }
                )

        log_action(
            self.logger, "info", "Credit registered",
            credit_id=credit_id, action="register_credit", resource="credit",
            extra={"credit_limit": config.credit_limit, "state": record.state.value}
        )
        return entry

    def get_credit(self, credit_id: str) -> CreditEntry:
        """
        Load a credit

        Raises:
            CreditNotFound: If no credit is registered under the ID
        """
        data = self.storage.load(self.table_name, credit_id)
        if data is None:
            raise CreditNotFound(credit_id)
        return CreditEntry.from_dict(data)

    def list_credits(self) -> List[CreditEntry]:
        """All registered credits in registration order"""
        return [CreditEntry.from_dict(data) for data in self.storage.load_all(self.table_name)]

    def refresh_credit(self, credit_id: str, now: int) -> Tuple[CreditRecord, DueDetail]:
        """
        Bring a credit's bill up to date as of `now` and persist the result

        Args:
            credit_id: Credit to refresh
            now: Refresh timestamp (UTC seconds)

        Returns:
            Tuple of (record, due_detail) after the refresh

        Raises:
            CreditNotFound: If no credit is registered under the ID
            OutOfOrderRefresh: If `now` precedes the last refresh
        """
        with self._lock:
            entry = self.get_credit(credit_id)
            if now < entry.last_refreshed_at:
                log_action(
                    self.logger, "warning", "Out of order refresh rejected",
                    credit_id=credit_id, action="refresh_credit",
                    extra={"last_refreshed_at": entry.last_refreshed_at, "now": now}
                )
                raise OutOfOrderRefresh(credit_id, entry.last_refreshed_at, now)

            record, due_detail = self.due_manager.get_due_info(
                entry.record, entry.config, entry.due_detail, now
            )

            updated = CreditEntry(
                credit_id=credit_id,
                config=entry.config,
                record=record,
                due_detail=due_detail,
                last_refreshed_at=now,
                created_at=entry.created_at,
                updated_at=datetime.now(timezone.utc),
            )
            with self.storage.atomic():
                self.storage.save(self.table_name, credit_id, updated.to_dict())
                self._audit_refresh(entry, updated, now)

        return record, due_detail

    def _audit_refresh(self, old: CreditEntry, new: CreditEntry, now: int) -> None:
        if not self.audit_trail:
            return

        if new.record.next_due_date != old.record.next_due_date:
            self.audit_trail.log_event(
                event_type=AuditEventType.BILL_REFRESHED,
                entity_type="credit",
                entity_id=new.credit_id,
                metadata={
                    'now': now,
                    'old_record': old.record.to_dict(),
                    'new_record': new.record.to_dict()
                }
            )

        if new.due_detail.late_fee != old.due_detail.late_fee:
            self.audit_trail.log_event(
                event_type=AuditEventType.LATE_FEE_ACCRUED,
                entity_type="credit",
                entity_id=new.credit_id,
                metadata={
                    'now': now,
                    'old_late_fee': old.due_detail.late_fee,
                    'new_late_fee': new.due_detail.late_fee,
                    'late_fee_updated_date': new.due_detail.late_fee_updated_date
                }
            )

        if new.record.state != old.record.state:
            self.audit_trail.log_event(
                event_type=AuditEventType.STATE_CHANGED,
                entity_type="credit",
                entity_id=new.credit_id,
                metadata={
                    'now': now,
                    'old_state': old.record.state,
                    'new_state': new.record.state
                }
            )

    def get_payoff_amount(self, credit_id: str) -> int:
        """Payoff amount of a stored credit as of its last refresh"""
        return self.due_manager.get_payoff_amount(self.get_credit(credit_id).record)

    def get_next_bill_refresh_date(self, credit_id: str) -> int:
        """Timestamp after which the stored credit needs a refresh"""
        return self.due_manager.get_next_bill_refresh_date(self.get_credit(credit_id).record)
