"""Budget rule advisor.

Two implementations share one interface: :class:`GeminiAdvisor` asks a
hosted language model for a personalised rule (and, in chat, for expenses
mentioned in free text), and :class:`LocalAdvisor` applies a fixed
heuristic on the share of salary spent on needs.  Callers go through
:func:`recommend_with_fallback` / :func:`extract_from_chat`, which never
raise: any advisor failure resolves to the local heuristic.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import requests

from . import config
from .lib.budget.calculations import category_percent, compute_metrics
from .lib.budget.categorization import categorize_expense
from .lib.budget.ledger import is_valid_entry, parse_amount
from .lib.budget.models import (
    BudgetRule,
    ChatExtraction,
    Expense,
    ExpenseDraft,
    ExpenseType,
    Recommendation,
)
from .lib.config import get_budget_config, get_text

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {'ar': 'Arabic', 'en': 'English'}
CHAT_NOTE = 'Advisor Chat Entry'


class AdvisorError(RuntimeError):
    """The advisor could not produce a usable answer."""


# =========================
# Prompts
# =========================

RULE_SYSTEM_PROMPT = """
Context: User salary = {salary} {currency}. Language: {language}.

ROLE:
You are "Qawam's Financial Analyzer".

TASK:
1. Analyze the provided list of expenses.
2. Calculate the actual Needs ratio.
3. Recommend the best budget rule for their actual situation:
   - If Needs are around 50%, recommend 50/30/20.
   - If Needs are high (e.g. > 55%), recommend 60/20/20 or 70/20/10 to be realistic.
   - Explain clearly why this rule fits them.
4. Answer in {language}.

OUTPUT FORMAT (JSON ONLY):
{{
  "message": "A concise explanation (max 3 sentences) of why this rule was chosen.",
  "rule": {{"needs": 60, "wants": 20, "savings": 20}}
}}
""".strip()

CHAT_SYSTEM_PROMPT = """
Context: User salary = {salary} {currency}. Language: {language}.
Current expenses: {expenses}

ROLE:
You are "Qawam's Financial Assistant" helping the user fill in a monthly budget.

TASK:
1. Extract every monthly expense the user mentions, with its amount.
2. Classify each one with exactly one of these type values: {types}.
3. If the message gives enough information, recommend a budget rule.
4. Reply to the user in {language}.

OUTPUT FORMAT (JSON ONLY):
{{
  "message": "Short reply to the user.",
  "expenses": [{{"name": "string", "amount": 0, "type": "string"}}],
  "rule": {{"needs": 50, "wants": 30, "savings": 20}}
}}
Omit "expenses" or "rule" when there is nothing to report.
""".strip()


def _expenses_json(expenses: Iterable[Expense]) -> str:
    return json.dumps(
        [{'name': e.name, 'amount': e.amount, 'type': e.category.value} for e in expenses],
        ensure_ascii=False,
    )


def call_llm_json(
    system_prompt: str,
    user_content: str,
    *,
    api_key: Optional[str],
    model: str,
    temperature: float = 0.1,
    timeout_connect: int = 10,
    timeout_read: int = 60,
) -> Dict[str, Any]:
    """Send one JSON-mode request to the model and return the decoded object.

    A single attempt is made; there is no retry.

    Raises:
        AdvisorError: On a missing key, transport or HTTP error, or a reply
            that is not a JSON object
    """
    if not api_key:
        raise AdvisorError("GEMINI_API_KEY is not configured")

    url = f"{config.ADVISOR_ENDPOINT}/{model}:generateContent"
    payload = {
        "systemInstruction": {"parts": [{"text": system_prompt}]},
        "contents": [{"role": "user", "parts": [{"text": user_content}]}],
        "generationConfig": {
            "temperature": temperature,
            "responseMimeType": "application/json",
        },
    }

    try:
        resp = requests.post(
            url,
            params={"key": api_key},
            json=payload,
            timeout=(timeout_connect, timeout_read),
        )
    except requests.RequestException as e:
        raise AdvisorError(f"Advisor request failed: {e}") from e

    if resp.status_code != 200:
        raise AdvisorError(f"Advisor call failed with HTTP {resp.status_code}: {resp.text[:500]}")

    try:
        data = resp.json()
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise AdvisorError(f"Unexpected advisor response shape: {e}") from e

    return _decode_json_text(text)


def _decode_json_text(text: str) -> Dict[str, Any]:
    cleaned = (text or '').strip()
    if cleaned.startswith('```'):
        cleaned = cleaned.strip('`')
        if cleaned.lower().startswith('json'):
            cleaned = cleaned[4:]
        cleaned = cleaned.strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise AdvisorError(f"Advisor returned malformed JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise AdvisorError("Advisor returned JSON that is not an object")
    return parsed


def parse_rule_payload(payload: Dict[str, Any]) -> Recommendation:
    """Validate a ``{rule?, message}`` reply.

    Raises:
        AdvisorError: If the message is missing or the rule is malformed
    """
    message = payload.get('message') or payload.get('analysis_message')
    if not isinstance(message, str) or not message.strip():
        raise AdvisorError("Advisor reply has no message")

    raw_rule = payload.get('rule', payload.get('recommended_rule'))
    rule = None
    if raw_rule is not None:
        if not isinstance(raw_rule, dict):
            raise AdvisorError("Advisor rule is not an object")
        try:
            rule = BudgetRule.from_dict(raw_rule)
        except ValueError as e:
            raise AdvisorError(f"Advisor rule is invalid: {e}") from e

    return Recommendation(message=message.strip(), rule=rule, source='ai')


def parse_chat_payload(payload: Dict[str, Any], lang: str) -> ChatExtraction:
    """Validate a chat reply; unusable expense items are dropped.

    Raises:
        AdvisorError: If ``expenses`` is not a list or the rule is malformed
    """
    drafts: List[ExpenseDraft] = []
    items = payload.get('expenses') or []
    if not isinstance(items, list):
        raise AdvisorError("Advisor 'expenses' is not a list")

    for item in items:
        if not isinstance(item, dict):
            continue
        name = str(item.get('name') or '').strip()
        amount = parse_amount(item.get('amount'))
        if not is_valid_entry(name, amount):
            continue
        try:
            category = ExpenseType.parse(item['type']) if item.get('type') else categorize_expense(name, lang)
        except ValueError:
            category = categorize_expense(name, lang)
        drafts.append(ExpenseDraft(name=name, amount=amount, category=category, note=CHAT_NOTE))

    raw_rule = payload.get('rule')
    rule = None
    if raw_rule is not None:
        if not isinstance(raw_rule, dict):
            raise AdvisorError("Advisor rule is not an object")
        try:
            rule = BudgetRule.from_dict(raw_rule)
        except ValueError as e:
            raise AdvisorError(f"Advisor rule is invalid: {e}") from e

    message = payload.get('message')
    return ChatExtraction(
        message=message.strip() if isinstance(message, str) else '',
        expenses=drafts,
        rule=rule,
        source='ai',
    )


class Advisor:
    """Interface shared by the hosted and the local advisor."""

    def __init__(self, lang: str = config.DEFAULT_LANGUAGE):
        self.lang = lang

    def recommend_rule(self, salary: float, expenses: Iterable[Expense]) -> Recommendation:
        raise NotImplementedError

    def extract_expenses(self, text: str, salary: float, expenses: Iterable[Expense]) -> ChatExtraction:
        raise NotImplementedError


class LocalAdvisor(Advisor):
    """Deterministic rule choice keyed on the needs share of salary.

    Needs above 65% of salary get 70/20/10, above 55% get 60/20/20, anything
    else keeps 50/30/20.
    """

    def recommend_rule(self, salary: float, expenses: Iterable[Expense]) -> Recommendation:
        metrics = compute_metrics(salary, expenses)
        needs_pct = category_percent(metrics.total_needs, salary)

        fallback = get_budget_config()['advisor_fallback']
        for threshold in fallback['thresholds']:
            if needs_pct > threshold['min_needs_pct']:
                return Recommendation(
                    message=get_text(self.lang, f"advisor_{threshold['message_key']}"),
                    rule=BudgetRule.from_dict(threshold['rule']),
                    source='local',
                )

        return Recommendation(
            message=get_text(self.lang, f"advisor_{fallback['default_message_key']}"),
            rule=BudgetRule.from_dict(get_budget_config()['default_rule']),
            source='local',
        )

    def extract_expenses(self, text: str, salary: float, expenses: Iterable[Expense]) -> ChatExtraction:
        recommendation = self.recommend_rule(salary, expenses)
        return ChatExtraction(
            message=get_text(self.lang, 'chat_fallback'),
            rule=recommendation.rule,
            source='local',
        )


class GeminiAdvisor(Advisor):
    """Advisor backed by the Gemini ``generateContent`` JSON endpoint."""

    def __init__(
        self,
        lang: str = config.DEFAULT_LANGUAGE,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.1,
    ):
        super().__init__(lang)
        self.api_key = api_key if api_key is not None else config.GEMINI_API_KEY
        self.model = model or config.ADVISOR_MODEL
        self.temperature = temperature

    def _context(self, salary: float) -> Dict[str, Any]:
        return {
            'salary': salary,
            'currency': get_text(self.lang, 'currency'),
            'language': LANGUAGE_NAMES.get(self.lang, 'English'),
        }

    def _call(self, system_prompt: str, user_content: str) -> Dict[str, Any]:
        return call_llm_json(
            system_prompt,
            user_content,
            api_key=self.api_key,
            model=self.model,
            temperature=self.temperature,
            timeout_connect=config.ADVISOR_TIMEOUT_CONNECT,
            timeout_read=config.ADVISOR_TIMEOUT_READ,
        )

    def recommend_rule(self, salary: float, expenses: Iterable[Expense]) -> Recommendation:
        system_prompt = RULE_SYSTEM_PROMPT.format(**self._context(salary))
        user_content = f"User Data: {_expenses_json(expenses)}. Analyze and recommend rule in JSON."
        return parse_rule_payload(self._call(system_prompt, user_content))

    def extract_expenses(self, text: str, salary: float, expenses: Iterable[Expense]) -> ChatExtraction:
        labels = get_budget_config()['labels'].get(self.lang, {})
        types = ', '.join(f'"{label}"' for label in labels.values()) or '"need", "want", "saving"'
        system_prompt = CHAT_SYSTEM_PROMPT.format(
            expenses=_expenses_json(expenses), types=types, **self._context(salary)
        )
        return parse_chat_payload(self._call(system_prompt, text), self.lang)


def default_advisor(lang: str = config.DEFAULT_LANGUAGE) -> Advisor:
    """Hosted advisor when a key is configured, otherwise the local heuristic."""
    if config.GEMINI_API_KEY:
        return GeminiAdvisor(lang=lang)
    return LocalAdvisor(lang=lang)


def recommend_with_fallback(
    advisor: Optional[Advisor],
    salary: float,
    expenses: Iterable[Expense],
    lang: str = config.DEFAULT_LANGUAGE,
) -> Recommendation:
    """Ask ``advisor`` for a rule, resolving any failure with the local heuristic."""
    items = list(expenses)
    local = LocalAdvisor(lang=lang)
    if advisor is None:
        return local.recommend_rule(salary, items)
    try:
        return advisor.recommend_rule(salary, items)
    except AdvisorError as e:
        logger.warning(f"Advisor analysis failed, switching to local fallback: {e}")
        recommendation = local.recommend_rule(salary, items)
        recommendation.error = str(e)
        return recommendation


def extract_from_chat(
    text: str,
    salary: float,
    expenses: Iterable[Expense],
    lang: str = config.DEFAULT_LANGUAGE,
    advisor: Optional[Advisor] = None,
) -> ChatExtraction:
    """Turn a chat message into expense drafts and an optional rule.

    Without a working advisor no expenses are extracted and the rule comes
    from the local heuristic; the error text is kept for the transcript.
    """
    items = list(expenses)
    local = LocalAdvisor(lang=lang)
    if advisor is None:
        return local.extract_expenses(text, salary, items)
    try:
        return advisor.extract_expenses(text, salary, items)
    except AdvisorError as e:
        logger.warning(f"Advisor chat failed, switching to local fallback: {e}")
        extraction = local.extract_expenses(text, salary, items)
        extraction.error = str(e)
        return extraction
