import logging

from django.conf import settings
from huggingface_hub import InferenceClient

from PROJECTS import valuation

logger = logging.getLogger(__name__)

SUMMARY_FAILED = "Failed to fetch AI insights. Please check your network connection."
SUMMARY_EMPTY = "Unable to generate summary at this time."
REPORT_FAILED = "Could not generate AI report."
REPORT_EMPTY = "Report unavailable."


class NarrativeUnavailable(Exception):
    pass


def project_prompt(stats):
    return (
        "Generate a short executive summary for a real estate project manager based on these stats "
        f'for the project "{stats.name}" in "{stats.location}":\n'
        f"- Total Sites: {stats.total}\n"
        f"- Sold: {stats.sold}\n"
        f"- Booked: {stats.booked}\n"
        f"- Unsold: {stats.unsold}\n"
        "Provide professional advice on sales strategy or market outlook in 3-4 sentences."
    )


def site_prompt(site):
    lines = [
        f"Generate a concise 2-sentence professional status report for real estate site #{site.number}.",
        "Details:",
        f"- Status: {site.status}",
        f"- Facing: {site.facing}",
        f"- Total Land Area: {valuation.format_sqft(site.land_area_sqft)} sq ft",
        f"- Total Calculated Value: Rs. {valuation.projected_total_value(site):,.0f}",
    ]
    if site.customer_name:
        lines.append(f"- Current Customer: {site.customer_name}")
    lines.append("Focus on the property's value proposition and current inventory status.")
    return "\n".join(lines)


class HuggingFaceNarrator:
    """Narrative text from a Hugging Face chat model.

    ``summarize`` and ``site_report`` never raise: any failure is logged and
    turned into a fixed fallback sentence.
    """

    def __init__(self, api_key=None, model_id=None, fallback_model_id=None, client=None):
        self.api_key = settings.HUGGINGFACE_API_KEY if api_key is None else api_key
        self.model_id = model_id or settings.NARRATIVE_MODEL_ID
        self.fallback_model_id = fallback_model_id or settings.NARRATIVE_FALLBACK_MODEL_ID
        self._client = client

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise NarrativeUnavailable("HUGGINGFACE_API_KEY is not configured")
            self._client = InferenceClient(api_key=self.api_key)
        return self._client

    def _complete(self, prompt, temperature):
        messages = [{"role": "user", "content": prompt}]
        client = self.client
        try:
            response = client.chat_completion(
                model=self.model_id,
                messages=messages,
                max_tokens=300,
                temperature=temperature,
            )
        except Exception as api_err:
            logger.error(f"Hugging Face API error ({self.model_id}): {api_err}")
            response = client.chat_completion(
                model=self.fallback_model_id,
                messages=messages,
                max_tokens=300,
            )
        content = response.choices[0].message.content
        return (content or "").strip()

    def summarize(self, stats):
        try:
            text = self._complete(project_prompt(stats), temperature=0.7)
        except NarrativeUnavailable as exc:
            logger.warning("Project summary skipped: %s", exc)
            return SUMMARY_FAILED
        except Exception:
            logger.exception("Project summary failed for %s", stats.name)
            return SUMMARY_FAILED
        return text or SUMMARY_EMPTY

    def site_report(self, site):
        try:
            text = self._complete(site_prompt(site), temperature=0.5)
        except NarrativeUnavailable as exc:
            logger.warning("Site report skipped: %s", exc)
            return REPORT_FAILED
        except Exception:
            logger.exception("Site report failed for %s", site.number)
            return REPORT_FAILED
        return text or REPORT_EMPTY


def get_narrator():
    return HuggingFaceNarrator()
