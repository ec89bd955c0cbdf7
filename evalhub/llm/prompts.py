import random
import uuid
from datetime import datetime, timezone

SYSTEM_PROMPT = "You are an expert code reviewer. Always respond with valid JSON only."

_TEMPLATE = """
You are an expert code reviewer and software engineering mentor with {years} years of experience. Evaluate the following coding task with fresh perspective and unique insights:

Evaluation ID: {evaluation_id}
Timestamp: {timestamp}
Title: {title}
Description: {description}
{code_block}

IMPORTANT: Provide a UNIQUE and DETAILED evaluation. Do not use generic responses. Analyze the specific code/task thoroughly and provide personalized feedback.

Please provide a comprehensive evaluation in the following JSON format:
{{
  "score": <number between 0-100 based on actual analysis>,
  "strengths": [<array of 3-5 specific strength points found in this code/task>],
  "weaknesses": [<array of 3-5 specific weakness points or areas needing improvement>],
  "improvements": [<array of 4-6 actionable improvement suggestions tailored to this specific code>],
  "full_report": "<detailed 300-500 word analysis covering: code quality assessment, architectural review, performance analysis, security considerations, best practices evaluation, specific recommendations, and learning path suggestions.>"
}}

Evaluation criteria (analyze thoroughly):
- Code correctness and functionality
- Code quality and readability
- Best practices and conventions
- Performance considerations
- Security aspects
- Error handling
- Documentation and comments
- Maintainability and scalability
- Algorithm efficiency
- Design patterns usage

If no code is provided, focus on:
- Task clarity and requirements analysis
- Suggested approach and architecture
- Best practices for implementation
- Potential challenges and solutions
- Technology stack recommendations
- Learning resources and next steps

Provide constructive, actionable, and SPECIFIC feedback that helps the developer improve.
Return ONLY the JSON object, no other text or markdown formatting.
"""

NO_CODE = "No code provided - evaluate the task description and provide guidance."

def build_prompt(title: str, description: str, code: str | None = None, rng: random.Random | None = None) -> str:
    rng = rng or random.Random()
    code_block = f"Code:\n```\n{code}\n```" if code else NO_CODE
    return _TEMPLATE.format(
        years=rng.randint(10, 24),
        evaluation_id=uuid.uuid4().hex[:8],
        timestamp=datetime.now(timezone.utc).isoformat(),
        title=title,
        description=description,
        code_block=code_block,
    )
