"""
Observation categorization collaborators.

TypeCategorizer is the default wiring: the category comes from the reporter's
chosen type and nothing is flagged as spam. OpenAICategorizer asks a chat model
for both and is switched on with OPENAI_CATEGORIZATION_ENABLED.
"""
from typing import Optional

from openai import OpenAI, OpenAIError

from sentinelph.core.constants import ObservationCategory
from sentinelph.logging.utils import get_app_logger
from sentinelph.config.settings import SentinelConfigs

logger = get_app_logger(__name__)
configs = SentinelConfigs()

CATEGORY_PROMPT = (
    "Categorize health observations into exactly one of: "
    "medication_purchase, illness_mention, absence_pattern, environmental_concern, or other. "
    "Respond with the category only."
)
SPAM_PROMPT = (
    "Determine if this health observation is spam, malicious, or inappropriate. "
    "Respond with only \"true\" or \"false\"."
)


def normalize_category(label: Optional[str]) -> str:
    if not label:
        return ObservationCategory.OTHER
    cleaned = label.strip().lower().replace(" ", "_").strip(".\"'")
    if cleaned in ObservationCategory.ALL:
        return cleaned
    for category in ObservationCategory.ALL:
        if category in cleaned:
            return category
    return ObservationCategory.OTHER


class TypeCategorizer:
    def categorize(self, description: str, observation_type: Optional[str] = None) -> str:
        return (observation_type or "").strip() or ObservationCategory.OTHER

    def detect_spam(self, description: str) -> bool:
        return False


class OpenAICategorizer:
    """Chat-completion backed categorizer; failures degrade to 'other' / not spam."""

    def __init__(self, client: Optional[OpenAI] = None):
        if client is None:
            if not configs.OPENAI_API_KEY:
                logger.error("OpenAI API key not configured")
                raise ValueError("OpenAI API key not configured")
            client = OpenAI(api_key=configs.OPENAI_API_KEY, timeout=configs.OPENAI_TIMEOUT)
        self.client = client
        self.model = configs.OPENAI_MODEL

    def _ask(self, system_prompt: str, text: str, temperature: float) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": text},
            ],
            temperature=temperature,
        )
        return response.choices[0].message.content or ""

    def categorize(self, description: str, observation_type: Optional[str] = None) -> str:
        if not description:
            return normalize_category(observation_type)
        try:
            return normalize_category(self._ask(CATEGORY_PROMPT, description, 0.3))
        except OpenAIError as e:
            logger.error(f"openai_categorize_error | error={e}")
            return ObservationCategory.OTHER

    def detect_spam(self, description: str) -> bool:
        if not description:
            return False
        try:
            return "true" in self._ask(SPAM_PROMPT, description, 0.1).lower()
        except OpenAIError as e:
            logger.error(f"openai_spam_detection_error | error={e}")
            return False


def build_categorizer():
    if configs.OPENAI_CATEGORIZATION_ENABLED:
        return OpenAICategorizer()
    return TypeCategorizer()
