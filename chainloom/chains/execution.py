# chainloom/chains/execution.py
"""
Execution entrypoints.

Every chain, top-level or nested, is invoked through one of these:

    call(chain, inputs)         -> ChainValues   one tracked run
    simple_call(chain, "text")  -> str           single-key convenience
    batch_call(chain, [...])    -> [ChainValues] concurrent fan-out

call() is the only place that talks to the run tracker and to memory:

    start run -> load memory -> chain.call() -> check outputs
              -> save memory (original inputs) -> end run

Any failure after the run started is reported to the observers exactly
once and then re-raised unchanged.

Usage:
    from chainloom.chains.execution import call, batch_call

    outputs = call(chain, {"question": "What is RAG?"})
    answers = batch_call(chain, [{"question": q} for q in questions])
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, List, Mapping, Optional, Sequence

from chainloom.callbacks.manager import CallbackManager
from chainloom.chains.base import CallOptions, Chain, ChainCallOptions
from chainloom.core.context import RunContext
from chainloom.core.exceptions import (
    MissingOutputKeyError,
    MultipleInputsError,
    MultipleOutputsError,
    WrongOutputTypeError,
)
from chainloom.core.values import ChainValues, as_chain_values
from chainloom.logging.logger import get_logger
from chainloom.logging.tags import BATCH, CHAIN, MEMORY

logger = get_logger(__name__)

DEFAULT_MAX_CONCURRENCY = 8

RUN_INFO_KEY = "run_info"


def _check_outputs(chain: Chain, outputs: Mapping[str, Any]) -> None:
    missing = [key for key in chain.output_keys() if key not in outputs]
    if missing:
        raise MissingOutputKeyError(
            f"{chain.kind()} chain did not return declared output key(s): {missing}"
        )


def call(
    chain: Chain,
    inputs: Mapping[str, Any],
    *,
    context: Optional[RunContext] = None,
    options: Optional[CallOptions] = None,
) -> ChainValues:
    """
    Run one chain invocation with run tracking and memory.

    Memory variables are merged over the caller's inputs (memory wins on
    conflict). Memory is saved only on success, with the caller's original
    inputs.

    Args:
        chain: Any object implementing the Chain protocol
        inputs: Input values; never mutated
        context: Shared cancellation signal (a fresh one if omitted)
        options: Call-scoped options (observers, stop, parent run id)

    Returns:
        Outputs containing every declared output key

    Raises:
        ChainCancelledError: If the context is already cancelled
        ObserverError: If an observer hook fails
        MissingOutputKeyError: If the chain returned an incomplete mapping
        Exception: Whatever the chain, its memory or its backends raised
    """
    context = context or RunContext()
    options = options or CallOptions()
    context.raise_if_cancelled()

    original = as_chain_values(inputs)
    manager = CallbackManager(
        options.callbacks,
        chain.observers(),
        verbose=chain.verbose(),
        parent_run_id=options.parent_run_id,
    )
    run_manager = manager.on_chain_start(chain.kind(), original)
    memory = chain.memory()

    try:
        values = original.copy()
        if memory is not None:
            context.raise_if_cancelled()
            loaded = memory.load_memory_variables(context, original)
            logger.debug(f"{MEMORY} loaded {sorted(loaded)} for {chain.kind()}")
            values.update(loaded)

        outputs = as_chain_values(
            chain.call(
                context,
                values,
                ChainCallOptions(run_manager=run_manager, stop=options.stop),
            )
        )
        _check_outputs(chain, outputs)

        if memory is not None:
            context.raise_if_cancelled()
            memory.save_context(context, original, outputs)
            logger.debug(f"{MEMORY} saved exchange for {chain.kind()}")
    except Exception as exc:
        logger.debug(f"{CHAIN} {chain.kind()} failed: {type(exc).__name__}: {exc}")
        run_manager.on_chain_error(exc)
        raise

    run_manager.on_chain_end(outputs)

    if options.include_run_info:
        outputs[RUN_INFO_KEY] = {"run_id": run_manager.run_id}

    return outputs


def simple_call(
    chain: Chain,
    input: Any,
    *,
    context: Optional[RunContext] = None,
    options: Optional[CallOptions] = None,
) -> str:
    """
    Call a single-input, single-output chain and return its text output.

    Raises:
        MultipleInputsError: If the chain does not declare exactly one input key
        MultipleOutputsError: If the chain does not declare exactly one output key
        WrongOutputTypeError: If the output value is not a str
    """
    input_keys = chain.input_keys()
    if len(input_keys) != 1:
        raise MultipleInputsError(
            f"simple_call needs exactly one input key, {chain.kind()} declares {input_keys}"
        )

    output_keys = chain.output_keys()
    if len(output_keys) != 1:
        raise MultipleOutputsError(
            f"simple_call needs exactly one output key, {chain.kind()} declares {output_keys}"
        )

    outputs = call(chain, {input_keys[0]: input}, context=context, options=options)

    value = outputs[output_keys[0]]
    if not isinstance(value, str):
        raise WrongOutputTypeError(
            f"{chain.kind()} returned {type(value).__name__} for {output_keys[0]!r}, expected str"
        )
    return value


def batch_call(
    chain: Chain,
    inputs: Sequence[Mapping[str, Any]],
    *,
    context: Optional[RunContext] = None,
    options: Optional[CallOptions] = None,
    max_concurrency: Optional[int] = None,
) -> List[ChainValues]:
    """
    Run call() over independent inputs concurrently.

    result[i] always corresponds to inputs[i]. The first failure cancels a
    child context shared by the remaining members, drops members that have
    not started, and is raised once every running member has returned.
    Cancelling ``context`` cancels the whole batch.

    Args:
        max_concurrency: Worker count (default: min(len(inputs), 8))
    """
    items = list(inputs)
    if not items:
        return []

    context = context or RunContext()
    context.raise_if_cancelled()
    batch_context = context.child()

    workers = max_concurrency or min(len(items), DEFAULT_MAX_CONCURRENCY)
    logger.info(f"{BATCH} {chain.kind()}: {len(items)} inputs, {workers} workers")

    results: List[Optional[ChainValues]] = [None] * len(items)
    first_error: Optional[BaseException] = None

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="chainloom-batch") as executor:
        futures = {
            executor.submit(call, chain, values, context=batch_context, options=options): index
            for index, values in enumerate(items)
        }

        for future in as_completed(futures):
            if future.cancelled():
                continue

            index = futures[future]
            error = future.exception()
            if error is None:
                results[index] = future.result()
            elif first_error is None:
                first_error = error
                logger.info(f"{BATCH} input {index} failed, cancelling batch: {error}")
                batch_context.cancel(f"batch member {index} failed")
                for pending in futures:
                    pending.cancel()

    if first_error is not None:
        raise first_error

    return [result for result in results if result is not None]


__all__ = [
    "call",
    "simple_call",
    "batch_call",
    "DEFAULT_MAX_CONCURRENCY",
    "RUN_INFO_KEY",
]
