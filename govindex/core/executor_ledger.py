"""Executor module registry, scheduled operations and per-log records."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from govindex.datastructures.governance_types import (
    DepositRegistered,
    ExecutorCallExecuted,
    ExecutorModule,
    ExecutorOperation,
    WithdrawalProcessed,
)
from govindex.datastructures.identifiers import encode_id, log_entity_id

from . import events
from .repository import GovernanceRepository


@dataclass(slots=True)
class ExecutorLedger:
    """Applies executor events to module, operation and log records."""

    repository: GovernanceRepository

    def handle_enabled_module(self, event: events.EnabledModule) -> ExecutorModule:
        module = ExecutorModule(
            id=event.module,
            enabled=True,
            enabled_at_block=event.block.number,
            enabled_at_timestamp=event.block.timestamp,
        )
        self.repository.save(module)
        logger.debug("Executor module {} enabled", event.module.hex())
        return module

    def handle_disabled_module(self, event: events.DisabledModule) -> None:
        self.repository.delete(ExecutorModule, event.module)
        logger.debug("Executor module {} disabled", event.module.hex())

    def handle_operation_scheduled(
        self, event: events.OperationScheduled
    ) -> ExecutorOperation:
        operation = ExecutorOperation(
            id=encode_id(event.op_nonce),
            module=event.module,
            to=event.to,
            value=event.tx_value,
            calldata=event.data,
            operation=event.operation,
            delay=event.delay,
            scheduled_at_block=event.block.number,
            scheduled_at_timestamp=event.block.timestamp,
        )
        self.repository.save(operation)
        return operation

    def _get_or_create_operation(
        self, op_nonce: int, module: bytes
    ) -> ExecutorOperation:
        operation = self.repository.load(ExecutorOperation, encode_id(op_nonce))
        if operation is None:
            logger.warning(
                "Executor operation {} was never scheduled; creating it on demand",
                op_nonce,
            )
            operation = ExecutorOperation(id=encode_id(op_nonce), module=module)
        return operation

    def handle_operation_canceled(
        self, event: events.OperationCanceled
    ) -> ExecutorOperation:
        operation = self._get_or_create_operation(event.op_nonce, event.module)
        operation.is_canceled = True
        operation.canceled_at_block = event.block.number
        operation.canceled_at_timestamp = event.block.timestamp
        self.repository.save(operation)
        return operation

    def handle_operation_executed(
        self, event: events.OperationExecuted
    ) -> ExecutorOperation:
        operation = self._get_or_create_operation(event.op_nonce, event.module)
        operation.is_executed = True
        operation.executed_at_block = event.block.number
        operation.executed_at_timestamp = event.block.timestamp
        self.repository.save(operation)
        return operation

    def handle_call_executed(self, event: events.CallExecuted) -> ExecutorCallExecuted:
        block = event.block
        record = ExecutorCallExecuted(
            id=log_entity_id(block.transaction_hash, block.log_index),
            target=event.target,
            value=event.tx_value,
            calldata=event.data,
            operation=event.operation,
            block_number=block.number,
            block_timestamp=block.timestamp,
            transaction_hash=block.transaction_hash,
        )
        self.repository.save(record)
        return record

    def handle_deposit_registered(
        self, event: events.DepositRegistered
    ) -> DepositRegistered:
        block = event.block
        record = DepositRegistered(
            id=log_entity_id(block.transaction_hash, block.log_index),
            account=event.account,
            quote_asset=event.quote_asset,
            deposit_amount=event.deposit_amount,
            mint_amount=event.mint_amount,
            block_number=block.number,
            block_timestamp=block.timestamp,
            transaction_hash=block.transaction_hash,
        )
        self.repository.save(record)
        return record

    def handle_withdrawal_processed(
        self, event: events.WithdrawalProcessed
    ) -> WithdrawalProcessed:
        block = event.block
        if len(event.assets) != len(event.payouts):
            logger.warning(
                "Withdrawal by {} lists {} assets but {} payouts",
                event.account.hex(),
                len(event.assets),
                len(event.payouts),
            )
        record = WithdrawalProcessed(
            id=log_entity_id(block.transaction_hash, block.log_index),
            account=event.account,
            receiver=event.receiver,
            shares_burned=event.shares_burned,
            total_shares_supply=event.total_shares_supply,
            assets=event.assets,
            payouts=event.payouts,
            block_number=block.number,
            block_timestamp=block.timestamp,
            transaction_hash=block.transaction_hash,
        )
        self.repository.save(record)
        return record
