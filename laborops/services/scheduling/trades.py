"""
Shift trades between employees.

Flow: the owner requests (pending) -> a colleague accepts or declines ->
a manager approves. Shifts only change owner at approval; a swap moves both
shifts inside one transaction.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from laborops.core.constants import TradeStatus, TradeType
from laborops.core.errors import ConflictError, InvalidInputError, NotFoundError
from laborops.db import transaction
from laborops.models.schedule import Schedule
from laborops.models.shift import Shift
from laborops.models.shift_trade import ShiftTrade
from laborops.models.user import User
from laborops.services.scheduling.auto_assign import apply_assignment
from laborops.services.scheduling.availability import AvailabilityResolver
from laborops.services.scheduling.directory import EmployeeDirectory

log = logging.getLogger(__name__)

RESPONSES = (TradeStatus.ACCEPTED.value, TradeStatus.DECLINED.value)


class ShiftTradeService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.directory = EmployeeDirectory(db)
        self.resolver = AvailabilityResolver(db)

    async def _require_shift(self, shift_id: str) -> Shift:
        shift = await self.db.get(Shift, shift_id)
        if not shift:
            raise NotFoundError.for_id("Shift", shift_id)
        return shift

    async def get_trade(self, trade_id: str) -> Optional[ShiftTrade]:
        return await self.db.get(ShiftTrade, trade_id)

    async def request_trade(
        self,
        shift_id: str,
        from_user_id: str,
        trade_type: str,
        to_user_id: Optional[str] = None,
        offered_shift_id: Optional[str] = None,
        reason: Optional[str] = None,
        manager_approval_required: bool = True,
    ) -> ShiftTrade:
        if trade_type not in {t.value for t in TradeType}:
            raise InvalidInputError(f"Invalid trade type: {trade_type}")

        shift = await self._require_shift(shift_id)
        if shift.user_id != from_user_id:
            raise InvalidInputError(f"Shift {shift_id} is not assigned to {from_user_id}")

        if trade_type == TradeType.SWAP.value:
            if not offered_shift_id:
                raise InvalidInputError("A swap needs an offered shift")
            if offered_shift_id == shift_id:
                raise InvalidInputError("A shift cannot be swapped for itself")
            offered = await self._require_shift(offered_shift_id)
            if not offered.user_id:
                raise InvalidInputError(f"Offered shift {offered_shift_id} is not assigned")
            if to_user_id and offered.user_id != to_user_id:
                raise InvalidInputError(f"Offered shift {offered_shift_id} is not assigned to {to_user_id}")
            # only the owner of the offered shift can take the other side
            to_user_id = offered.user_id

        trade = ShiftTrade(
            shift_id=shift_id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            trade_type=trade_type,
            offered_shift_id=offered_shift_id,
            reason=reason,
            status=TradeStatus.PENDING.value,
            manager_approval_required=manager_approval_required,
        )
        self.db.add(trade)
        await self.db.commit()
        await self.db.refresh(trade)

        log.info("trade requested: trade=%s shift=%s type=%s from=%s", trade.id, shift_id, trade_type, from_user_id)
        return trade

    async def respond_to_trade(self, trade_id: str, user_id: str, response: str) -> ShiftTrade:
        if response not in RESPONSES:
            raise InvalidInputError(f"Response must be one of {', '.join(RESPONSES)}")

        trade = await self.get_trade(trade_id)
        if not trade:
            raise NotFoundError.for_id("Trade", trade_id)
        if trade.status != TradeStatus.PENDING.value:
            raise ConflictError(f"Trade {trade_id} is already {trade.status}")
        if trade.to_user_id and trade.to_user_id != user_id:
            raise ConflictError(f"Trade {trade_id} was offered to another employee")
        if response == TradeStatus.ACCEPTED.value and trade.offered_shift_id:
            offered = await self._require_shift(trade.offered_shift_id)
            if offered.user_id != user_id:
                raise ConflictError(f"Offered shift {trade.offered_shift_id} is not assigned to {user_id}")

        trade.status = response
        if response == TradeStatus.ACCEPTED.value:
            trade.to_user_id = user_id

        await self.db.commit()
        await self.db.refresh(trade)
        log.info("trade %s: trade=%s by=%s", response, trade_id, user_id)
        return trade

    async def approve_trade(self, trade_id: str, approved_by: str) -> ShiftTrade:
        async with transaction(self.db, "trade approval"):
            trade = await self.get_trade(trade_id)
            if not trade:
                raise NotFoundError.for_id("Trade", trade_id)
            if trade.status != TradeStatus.ACCEPTED.value:
                raise ConflictError("Trade must be accepted by recipient before manager approval")

            shift = await self._require_shift(trade.shift_id)
            if shift.user_id != trade.from_user_id:
                raise ConflictError(f"Shift {shift.id} is no longer assigned to {trade.from_user_id}")

            offered = None
            if trade.trade_type == TradeType.SWAP.value and trade.offered_shift_id:
                offered = await self._require_shift(trade.offered_shift_id)
                if offered.user_id != trade.to_user_id:
                    raise ConflictError(f"Offered shift {offered.id} is no longer assigned to {trade.to_user_id}")

            # both sides must be free before anything moves; each gives up its own shift
            traded_ids = [shift.id] + ([offered.id] if offered else [])
            await self.resolver.ensure_assignable(trade.to_user_id, shift, also_exclude=traded_ids)
            if offered:
                await self.resolver.ensure_assignable(trade.from_user_id, offered, also_exclude=traded_ids)

            apply_assignment(shift, trade.to_user_id, await self.directory.hourly_rate(trade.to_user_id))
            if offered:
                apply_assignment(offered, trade.from_user_id, await self.directory.hourly_rate(trade.from_user_id))

            trade.status = TradeStatus.APPROVED.value
            trade.approved_by = approved_by
            trade.approved_at = datetime.utcnow()

        await self.db.refresh(trade)
        log.info(
            "trade approved: trade=%s shift=%s from=%s to=%s by=%s",
            trade.id, trade.shift_id, trade.from_user_id, trade.to_user_id, approved_by,
        )
        return trade

    async def list_trades(self, location_id: str, status: Optional[str] = None) -> list[dict]:
        from_user = aliased(User)
        to_user = aliased(User)
        q = (
            select(ShiftTrade, Shift, from_user.name, to_user.name)
            .join(Shift, Shift.id == ShiftTrade.shift_id)
            .join(Schedule, Schedule.id == Shift.schedule_id)
            .join(from_user, from_user.id == ShiftTrade.from_user_id)
            .outerjoin(to_user, to_user.id == ShiftTrade.to_user_id)
            .where(Schedule.location_id == location_id)
        )
        if status:
            q = q.where(ShiftTrade.status == status)
        q = q.order_by(ShiftTrade.created_at.desc(), ShiftTrade.id)

        rows = (await self.db.execute(q)).all()
        return [
            {
                "trade": trade,
                "shift_date": shift.shift_date,
                "start_time": shift.start_time,
                "end_time": shift.end_time,
                "position": shift.position,
                "from_user_name": from_name,
                "to_user_name": to_name,
            }
            for trade, shift, from_name, to_name in rows
        ]
