"""
CV Analyzer for Orca

Turns an uploaded CV and a target role into the skills and experiences
the interviewer builds its technical and behavioral questions on.

A malformed model answer never blocks the interview: the analyzer falls
back to fixed placeholder lists sized to the requested counts.
"""

import base64
import json
import logging

from pydantic import ValidationError

from orca.core.ai_client import AIClient
from orca.models.interview import CvAnalysis, CvDocument
from orca.prompts.cv_analysis import CvAnalysisPrompts

logger = logging.getLogger(__name__)


FALLBACK_SKILLS = ["SQL", "Python", "Power BI", "Excel", "Teamwork", "R"]
FALLBACK_EXPERIENCES = ["a past project", "a leadership role", "an internship experience"]


def _sized(items: list[str], count: int) -> list[str]:
    """Cycle or truncate a placeholder list to exactly count entries."""
    return [items[i % len(items)] for i in range(count)]


class CVAnalyzer:
    """
    Extracts a structured skills/experience summary from a CV.

    Sends exactly one request per analysis and never mutates session state.
    """

    def __init__(self, ai_client: AIClient):
        """
        Initialize the analyzer.

        Args:
            ai_client: Gateway to the remote model
        """
        self.ai_client = ai_client
        self.prompts = CvAnalysisPrompts()

    async def analyze(
        self,
        document: CvDocument,
        target_role: str,
        technical_count: int,
        behavioral_count: int,
    ) -> CvAnalysis:
        """
        Analyze a CV for a target role.

        Args:
            document: Uploaded CV
            target_role: Role the candidate is interviewing for
            technical_count: Number of technical skills to extract
            behavioral_count: Number of experiences to extract

        Returns:
            CvAnalysis with exactly the requested list lengths

        Raises:
            SessionError: If the remote call itself fails
        """
        prompt = self.prompts.analysis_prompt(target_role, technical_count, behavioral_count)
        encoded = base64.b64encode(document.content).decode("ascii")

        messages = [
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{document.mime_type};base64,{encoded}"},
                    },
                    {"type": "text", "text": prompt},
                ],
            }
        ]

        settings = self.ai_client.settings
        response = await self.ai_client.complete(
            messages,
            endpoint=settings.analysis_endpoint,
            max_tokens=settings.analysis_max_tokens,
            temperature=settings.analysis_temperature,
            trace_name="cv_analysis",
        )

        analysis = self._parse_analysis_response(response, technical_count, behavioral_count)
        if analysis is None:
            return self.fallback_analysis(technical_count, behavioral_count)

        logger.info(
            f"CV analyzed for '{target_role}': "
            f"{len(analysis.technical_skills)} skills, {len(analysis.experiences)} experiences"
        )
        return analysis

    def _parse_analysis_response(
        self,
        response: str,
        technical_count: int,
        behavioral_count: int,
    ) -> CvAnalysis | None:
        """Parse the model answer, or return None if it is unusable."""
        json_text = response.replace("```json", "").replace("```", "").strip()

        try:
            analysis = CvAnalysis.model_validate(json.loads(json_text))
        except (json.JSONDecodeError, RecursionError, ValidationError) as e:
            logger.warning(f"Failed to parse CV analysis, using fallback: {e}")
            return None

        if (
            len(analysis.technical_skills) != technical_count
            or len(analysis.experiences) != behavioral_count
        ):
            logger.warning(
                "CV analysis has wrong list lengths, using fallback: "
                f"expected {technical_count}/{behavioral_count}, "
                f"got {len(analysis.technical_skills)}/{len(analysis.experiences)}"
            )
            return None

        return analysis

    def fallback_analysis(self, technical_count: int, behavioral_count: int) -> CvAnalysis:
        """Placeholder analysis used when the model answer is unusable."""
        return CvAnalysis(
            technical_skills=_sized(FALLBACK_SKILLS, technical_count),
            experiences=_sized(FALLBACK_EXPERIENCES, behavioral_count),
        )
