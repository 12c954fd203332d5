"""
Retry With Validation
通用的 "执行 -> 校验 -> 失败重试" 引擎, 基于 tenacity

与 schema / feed / 模型无关, 两条生成管线共用同一实现。
尝试严格串行; 只在两次尝试之间等待。
"""
from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Generic,
    Optional,
    Protocol,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
)

from .exceptions import RetryValidationError


T = TypeVar("T")

Delay = Union[float, Callable[[int], float]]
ErrorHook = Callable[[BaseException, int], Any]
ValidationHook = Callable[[Any, int], Any]


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


@dataclass(frozen=True)
class _Outcome(Generic[T]):
    value: T
    valid: bool


@dataclass(frozen=True)
class RetrySpec:
    """重试配置: 最大尝试次数 + 固定间隔或 f(attempt) 间隔(秒)"""

    max_attempts: int = 3
    delay: Delay = 0.0

    def __post_init__(self):
        if int(self.max_attempts) < 1:
            raise ValueError("max_attempts must be >= 1")

    @classmethod
    def from_settings(cls, settings: Any, *, max_attempts: Optional[int] = None) -> "RetrySpec":
        """从 RetrySettings 构建 (delay 使用其退避策略)"""
        return cls(
            max_attempts=int(max_attempts or settings.max_attempts),
            delay=settings.delay_for,
        )


class Attemptable(Protocol[T]):
    """可重试任务: run() 产生结果, is_valid() 判断结果是否合格"""

    async def run(self) -> T:
        ...

    async def is_valid(self, value: T) -> bool:
        ...


async def retry_with_validation(
    task: Callable[[], Awaitable[T]],
    validate: Callable[[T], Union[bool, Awaitable[bool]]],
    *,
    max_attempts: int = 3,
    delay: Delay = 0.0,
    on_error: Optional[ErrorHook] = None,
    on_validation_failure: Optional[ValidationHook] = None,
    abort_on: Tuple[Type[BaseException], ...] = (),
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    执行 task 并校验结果, 失败 (抛异常或校验不通过) 时重试

    Args:
        task: 异步任务
        validate: 结果校验函数 (同步或异步)
        max_attempts: 最大尝试次数 (至少 1)
        delay: 两次尝试之间的等待(秒), 或以尝试序号为参数的函数
        on_error: 任务抛出异常时的回调 (error, attempt)
        on_validation_failure: 校验不通过时的回调 (result, attempt)
        abort_on: 立即向上抛出、不再重试的异常类型
        sleep: 等待函数 (测试时可注入)

    Returns:
        第一个通过校验的结果

    Raises:
        任意一次尝试中最后抛出的异常; 若从未抛出异常则抛出 RetryValidationError
    """
    attempts = max(1, int(max_attempts))
    last_error: Optional[BaseException] = None
    outcome: Optional[_Outcome[T]] = None

    def _wait(retry_state: RetryCallState) -> float:
        value = delay(retry_state.attempt_number) if callable(delay) else delay
        return max(0.0, float(value or 0.0))

    def _should_retry_error(error: BaseException) -> bool:
        return isinstance(error, Exception) and not isinstance(error, abort_on)

    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=_wait,
        retry=retry_if_exception(_should_retry_error) | retry_if_result(lambda o: not o.valid),
        sleep=sleep,
        reraise=False,
    )

    try:
        async for attempt in retrying:
            attempt_number = attempt.retry_state.attempt_number
            with attempt:
                try:
                    value = await task()
                    valid = bool(await _maybe_await(validate(value)))
                    if not valid and on_validation_failure is not None:
                        await _maybe_await(on_validation_failure(value, attempt_number))
                except Exception as exc:
                    last_error = exc
                    if on_error is not None:
                        await _maybe_await(on_error(exc, attempt_number))
                    raise
            if not attempt.retry_state.outcome.failed:
                outcome = _Outcome(value=value, valid=valid)
                attempt.retry_state.set_result(outcome)
    except RetryError:
        if last_error is not None:
            raise last_error
        raise RetryValidationError(attempts) from None

    return outcome.value


async def run_attemptable(
    attemptable: Attemptable[T],
    spec: RetrySpec,
    **hooks: Any,
) -> T:
    """以 RetrySpec 驱动一个 Attemptable"""
    return await retry_with_validation(
        attemptable.run,
        attemptable.is_valid,
        max_attempts=spec.max_attempts,
        delay=spec.delay,
        **hooks,
    )
