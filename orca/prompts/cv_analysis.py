"""
CV Analysis Prompt Templates

Asks the model to pull a fixed number of technical skills and
experiences out of an uploaded CV.
"""


class CvAnalysisPrompts:
    """Prompt templates for the CV intake request."""

    SYSTEM_CONTEXT = """You are an expert HR analyst screening CVs for entry-level candidates."""

    def analysis_prompt(
        self,
        target_role: str,
        technical_count: int,
        behavioral_count: int,
    ) -> str:
        """Generate the instruction sent alongside the CV document."""
        return f"""{self.SYSTEM_CONTEXT}

Analyze the attached CV for a '{target_role}' position.

Extract exactly {technical_count} key technical skills and exactly {behavioral_count} key experiences (internships, projects, or leadership roles).

Respond with a single minified JSON object and nothing else, no markdown:
{{"technical_skills": [<{technical_count} strings>], "experiences": [<{behavioral_count} strings>]}}"""
