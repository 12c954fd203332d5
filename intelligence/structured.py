"""
Structured Generation Client
调用生成模型并用严格 schema 校验输出

两条路径共用同一套 "请求 -> 校验 -> 重试" 流程 (utils.retry):
- 议题文章: 模型以 JSON object 返回, 直接解析后用 ArticleSearchResult 校验
- 指标深度分析: 模型返回自由文本, 先做 JSON 修复再用 DeepDiveResult 校验,
  不合格时再走一次只负责 schema 对齐的修复生成
"""
from typing import Any, List, Optional, Sequence, Set
import json
import logging

from pydantic import BaseModel, ValidationError

from config import RankingSettings, RetrySettings, get_ranking_settings, get_retry_settings
from models import (
    ArticleSearchResult,
    DeepDiveCategory,
    DeepDiveResult,
    ExpandedMetrics,
    ScoredArticle,
    describe_chart,
)
from processing import build_articles_digest, build_metrics_digest, canonicalize_link
from utils.exceptions import (
    CampaignInsightsError,
    GenerationTransportError,
    RetryValidationError,
    SchemaValidationError,
    UpstreamGatewayError,
)
from utils.retry import RetrySpec, retry_with_validation, run_attemptable

from .json_repair import repair_json
from .llm import BaseLLM, Message
from .prompts import (
    ARTICLE_SELECTION_SYSTEM_PROMPT,
    DEEP_DIVE_REPAIR_SYSTEM_PROMPT,
    DEEP_DIVE_SYSTEM_PROMPT,
    article_selection_prompt,
    deep_dive_prompt,
    deep_dive_repair_prompt,
)


logger = logging.getLogger(__name__)

JSON_OBJECT_FORMAT = {"type": "json_object"}


def format_violations(error: ValidationError) -> List[str]:
    """把 pydantic 校验错误展开为 "字段路径: 原因" 列表"""
    violations = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "root"
        violations.append(f"{location}: {item.get('msg', 'invalid value')}")
    return violations


async def _request(llm: BaseLLM, messages: List[Message], **kwargs: Any) -> str:
    """发起一次生成请求; 非项目内异常统一视为传输失败"""
    try:
        response = await llm.acomplete(messages, **kwargs)
    except CampaignInsightsError:
        raise
    except Exception as exc:
        raise GenerationTransportError(
            f"Generation request failed: {exc}",
            provider=getattr(llm, "provider", None),
        ) from exc
    return response.content or ""


class _ValidatedAttempt:
    """可重试生成任务的公共部分: 记录最后一次的解析结果与违规列表"""

    schema = BaseModel

    def __init__(self, llm: BaseLLM, messages: List[Message], **request_kwargs: Any):
        self.llm = llm
        self.messages = messages
        self.request_kwargs = request_kwargs
        self.result: Optional[BaseModel] = None
        self.violations: List[str] = []

    async def run(self) -> str:
        return await _request(self.llm, self.messages, **self.request_kwargs)

    def parse(self, raw: str) -> Any:
        return json.loads(raw)

    def extra_violations(self, result: BaseModel) -> List[str]:
        return []

    async def is_valid(self, raw: str) -> bool:
        self.result = None
        if not raw.strip():
            self.violations = ["root: empty response"]
            return False
        try:
            payload = self.parse(raw)
        except RecursionError:
            self.violations = ["root: output is not valid JSON (nested too deeply)"]
            return False
        except ValueError as exc:
            self.violations = [f"root: output is not valid JSON ({exc})"]
            return False
        try:
            result = self.schema.model_validate(payload)
        except ValidationError as exc:
            self.violations = format_violations(exc)
            return False
        self.violations = self.extra_violations(result)
        if self.violations:
            return False
        self.result = result
        return True


class _ArticleSelectionAttempt(_ValidatedAttempt):
    schema = ArticleSearchResult

    def __init__(self, llm: BaseLLM, messages: List[Message], allowed_links: Set[str]):
        super().__init__(llm, messages, response_format=JSON_OBJECT_FORMAT)
        self.allowed_links = allowed_links

    def extra_violations(self, result: ArticleSearchResult) -> List[str]:
        return [
            f"articles.{index}.link: not one of the supplied candidate links"
            for index, article in enumerate(result.articles)
            if canonicalize_link(article.link) not in self.allowed_links
        ]


class _DeepDiveAttempt(_ValidatedAttempt):
    schema = DeepDiveResult

    def parse(self, raw: str) -> Any:
        return repair_json(raw)


class StructuredGenerationClient:
    """
    结构化生成客户端

    错误语义:
    - UpstreamGatewayError: 上游返回 HTML 页面, 立即抛出, 不重试
    - GenerationTransportError: 请求本身失败, 重试耗尽后抛出
    - SchemaValidationError: 输出可解析但不符合契约, 携带违规字段列表
    """

    def __init__(
        self,
        llm: BaseLLM,
        retry_settings: Optional[RetrySettings] = None,
        ranking_settings: Optional[RankingSettings] = None,
        sleep=None,
    ):
        self.llm = llm
        self.retry_settings = retry_settings or get_retry_settings()
        self.ranking_settings = ranking_settings or get_ranking_settings()
        self._sleep = sleep

    def _hooks(self, label: str, attempt: Optional[_ValidatedAttempt] = None) -> dict:
        def on_error(error: BaseException, attempt_number: int) -> None:
            logger.warning(f"{label} attempt {attempt_number} failed: {error}")

        def on_validation_failure(_value: Any, attempt_number: int) -> None:
            violations = "; ".join(attempt.violations) if attempt is not None else ""
            logger.warning(f"{label} attempt {attempt_number} failed validation: {violations}")

        hooks = {
            "on_error": on_error,
            "on_validation_failure": on_validation_failure,
            "abort_on": (UpstreamGatewayError,),
        }
        if self._sleep is not None:
            hooks["sleep"] = self._sleep
        return hooks

    async def select_articles(
        self,
        issue: str,
        shortlist: Sequence[ScoredArticle],
    ) -> ArticleSearchResult:
        """
        从候选短名单中挑选议题相关文章

        Args:
            issue: 议题
            shortlist: 已排序的候选文章 (模型只能从中挑选)

        Returns:
            ArticleSearchResult

        Raises:
            UpstreamGatewayError / GenerationTransportError / SchemaValidationError
        """
        digest = build_articles_digest(shortlist)
        messages = [
            Message.system(ARTICLE_SELECTION_SYSTEM_PROMPT),
            Message.user(
                article_selection_prompt(
                    issue,
                    len(shortlist),
                    digest,
                    max_selected=self.ranking_settings.max_selected,
                )
            ),
        ]
        allowed = {canonicalize_link(article.link) for article in shortlist}
        allowed.discard(None)
        attempt = _ArticleSelectionAttempt(self.llm, messages, allowed)

        try:
            await run_attemptable(
                attempt,
                RetrySpec.from_settings(self.retry_settings),
                **self._hooks("Article selection", attempt),
            )
        except RetryValidationError as exc:
            raise SchemaValidationError(
                "Article selection output failed schema validation",
                violations=attempt.violations,
                attempts=exc.attempts,
            ) from exc

        result = attempt.result
        logger.info(f"Selected {len(result.articles)} articles for '{issue}'")
        return result

    async def _draft_deep_dive(self, messages: List[Message]) -> str:
        """第一轮生成: 只对传输失败和空输出重试"""
        try:
            return await retry_with_validation(
                lambda: _request(self.llm, messages),
                lambda text: bool(text.strip()),
                max_attempts=self.retry_settings.max_attempts,
                delay=self.retry_settings.delay_for,
                **self._hooks("Deep dive draft"),
            )
        except RetryValidationError as exc:
            raise GenerationTransportError(
                "Generation returned an empty deep dive draft",
                provider=getattr(self.llm, "provider", None),
            ) from exc

    async def generate_deep_dive(
        self,
        metrics: ExpandedMetrics,
        category: DeepDiveCategory,
    ) -> DeepDiveResult:
        """
        生成指标深度分析 (四个类别的洞察 + 一张图表)

        Args:
            metrics: 竞选指标数据集
            category: 主分析类别

        Returns:
            DeepDiveResult

        Raises:
            UpstreamGatewayError / GenerationTransportError / SchemaValidationError
        """
        category = DeepDiveCategory(category)
        messages = [
            Message.system(DEEP_DIVE_SYSTEM_PROMPT),
            Message.user(deep_dive_prompt(category, build_metrics_digest(metrics))),
        ]
        draft_text = await self._draft_deep_dive(messages)

        draft = _DeepDiveAttempt(self.llm, messages)
        if await draft.is_valid(draft_text):
            logger.info(f"Deep dive for {category.value}: {describe_chart(draft.result.chart)}")
            return draft.result

        logger.warning(
            f"Deep dive draft for {category.value} failed validation, running repair pass: "
            f"{'; '.join(draft.violations)}"
        )
        repair = _DeepDiveAttempt(
            self.llm,
            [
                Message.system(DEEP_DIVE_REPAIR_SYSTEM_PROMPT),
                Message.user(deep_dive_repair_prompt(category, draft_text, draft.violations)),
            ],
            response_format=JSON_OBJECT_FORMAT,
        )
        try:
            await run_attemptable(
                repair,
                RetrySpec.from_settings(
                    self.retry_settings,
                    max_attempts=self.retry_settings.repair_attempts,
                ),
                **self._hooks("Deep dive repair", repair),
            )
        except RetryValidationError as exc:
            raise SchemaValidationError(
                "Deep dive output failed schema validation after repair",
                violations=repair.violations,
                attempts=exc.attempts,
            ) from exc

        logger.info(f"Deep dive for {category.value} repaired: {describe_chart(repair.result.chart)}")
        return repair.result
