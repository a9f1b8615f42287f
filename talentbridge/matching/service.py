"""
AI candidate matching and profile summaries.

Matching asks the language model to structure free-text job requirements,
then scores the best open-to-work candidates against them. Any failure of
the language model, or its absence, falls back to ranking by profile score.
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from talentbridge.candidates.service import get_profile, refresh_profile
from talentbridge.db import db
from talentbridge.exceptions import ExternalServiceError, ValidationError
from talentbridge.llm.client import parse_json_object
from talentbridge.models import CandidateProfile
from talentbridge.search.service import skills_filter
from talentbridge.simple_logger import get_logger

logger = get_logger("matching")

CANDIDATE_POOL_SIZE = 20
MAX_MATCHES = 10
HIGH_PROFILE_SCORE = 80

REQUIREMENTS_PROMPT = (
    "Extract key requirements from the job description. Return ONLY valid JSON with fields: "
    "skills[], minExperience, location, mustHaveSkills[]. No markdown, just JSON.\n\n"
    "Job Description:\n{requirements}"
)

SUMMARY_SYSTEM_PROMPT = (
    "You are an expert HR analyst. Analyze the candidate profile and provide structured insights."
)

PLACEHOLDER_SUMMARY = {
    'skillExtraction': [],
    'experienceSummary': 'Unable to generate summary',
    'strengths': ['Profile needs more details'],
    'weakAreas': ['Add more information to profile'],
    'overallSummary': 'Profile under development',
}


def match_by_requirements(requirements: str, llm_client=None) -> List[Dict[str, Any]]:
    """Rank open-to-work candidates against free-text job requirements"""
    if not isinstance(requirements, str) or not requirements.strip():
        raise ValidationError("Job requirements text is required")

    if llm_client is None:
        logger.info("LLM not configured, matching by profile score")
        return fallback_matches()

    try:
        extracted = extract_requirements(requirements, llm_client)
        candidates = _candidate_pool(extracted)
    except Exception as e:
        logger.warning(f"AI matching failed, falling back to profile score ranking: {e}")
        return fallback_matches()

    scored = [
        {
            'candidate': candidate,
            'match_score': calculate_match_score(candidate, extracted),
            'match_reason': match_reason(candidate, extracted),
        }
        for candidate in candidates
    ]
    # stable sort keeps profile-score order among equal match scores
    scored.sort(key=lambda item: item['match_score'], reverse=True)
    return scored[:MAX_MATCHES]


def extract_requirements(requirements: str, llm_client) -> Dict[str, Any]:
    raw = parse_json_object(llm_client.generate(REQUIREMENTS_PROMPT.format(requirements=requirements)))

    skills = raw.get('skills') or []
    if not isinstance(skills, list):
        raise ExternalServiceError("'skills' in extracted requirements is not a list")
    skills = [s.strip() for s in skills if isinstance(s, str) and s.strip()]

    min_experience = raw.get('minExperience')
    if isinstance(min_experience, bool) or not isinstance(min_experience, (int, float)) or min_experience <= 0:
        min_experience = None

    must_have = raw.get('mustHaveSkills') or []
    return {
        'skills': skills,
        'min_experience': min_experience,
        'location': raw.get('location') if isinstance(raw.get('location'), str) else None,
        'must_have_skills': [s for s in must_have if isinstance(s, str)] if isinstance(must_have, list) else [],
    }


def _candidate_pool(requirements: Dict[str, Any]) -> List[CandidateProfile]:
    query = CandidateProfile.query.filter(CandidateProfile.is_open_to_work.is_(True))
    if requirements['skills']:
        query = query.filter(skills_filter(requirements['skills']))
    if requirements['min_experience']:
        query = query.filter(CandidateProfile.total_experience_years >= requirements['min_experience'])
    return (
        query.order_by(CandidateProfile.profile_score.desc(), CandidateProfile.id.asc())
        .limit(CANDIDATE_POOL_SIZE)
        .all()
    )


def _matched_skills(candidate, required_skills: List[str]) -> List[str]:
    wanted = [skill.lower() for skill in required_skills]
    return [
        name for name in candidate.skill_names
        if any(req in name.lower() for req in wanted)
    ]


def calculate_match_score(candidate, requirements: Dict[str, Any]) -> int:
    """Weighted match in [0, 100]: skills 40, experience 30, profile score 30"""
    score = 0.0

    required_skills = requirements.get('skills') or []
    if required_skills:
        ratio = len(_matched_skills(candidate, required_skills)) / len(required_skills)
        score += min(ratio, 1.0) * 40

    min_experience = requirements.get('min_experience')
    experience = candidate.total_experience_years or 0
    if min_experience:
        if experience >= min_experience:
            score += 30
        else:
            score += (experience / min_experience) * 30

    score += ((candidate.profile_score or 0) / 100) * 30

    # round half up
    return max(0, min(100, int(math.floor(score + 0.5))))


def match_reason(candidate, requirements: Dict[str, Any]) -> str:
    reasons = []

    required_skills = requirements.get('skills') or []
    if required_skills:
        matched = _matched_skills(candidate, required_skills)
        if matched:
            reasons.append(f"Matches {len(matched)} required skills")

    experience = candidate.total_experience_years or 0
    if experience >= (requirements.get('min_experience') or 0):
        reasons.append(f"{_format_years(experience)} years experience")

    if (candidate.profile_score or 0) >= HIGH_PROFILE_SCORE:
        reasons.append('High profile score')

    return ', '.join(reasons) or 'Good overall match'


def fallback_matches() -> List[Dict[str, Any]]:
    candidates = (
        CandidateProfile.query
        .filter(CandidateProfile.is_open_to_work.is_(True))
        .order_by(CandidateProfile.profile_score.desc(), CandidateProfile.id.asc())
        .limit(MAX_MATCHES)
        .all()
    )
    return [
        {
            'candidate': candidate,
            'match_score': candidate.profile_score,
            'match_reason': 'High profile score',
        }
        for candidate in candidates
    ]


def generate_profile_summary(candidate_id, llm_client=None) -> Dict[str, Any]:
    """AI insight block for a candidate, stored on the profile when the model answers"""
    profile = get_profile(candidate_id)

    if llm_client is None:
        return mock_summary(profile)

    try:
        response = llm_client.generate(build_profile_prompt(profile), system=SUMMARY_SYSTEM_PROMPT)
    except Exception as e:
        logger.warning(f"Profile summary generation failed for candidate {profile.id}: {e}")
        return mock_summary(profile)

    summary = parse_summary(response)
    profile.ai_summary = dict(summary, generatedAt=datetime.utcnow().isoformat())
    refresh_profile(profile)
    db.session.commit()
    logger.info(f"Stored AI summary for candidate {profile.id}")
    return summary


def parse_summary(response: str) -> Dict[str, Any]:
    try:
        data = parse_json_object(response)
    except ExternalServiceError as e:
        logger.warning(f"Unparseable profile summary: {e}")
        return dict(PLACEHOLDER_SUMMARY)

    return {
        'skillExtraction': _string_items(data.get('skillExtraction')),
        'experienceSummary': _text(data.get('experienceSummary')),
        'strengths': _string_items(data.get('strengths')),
        'weakAreas': _string_items(data.get('weakAreas')),
        'overallSummary': _text(data.get('overallSummary')),
    }


def build_profile_prompt(profile) -> str:
    skills = profile.skill_names
    education = ', '.join(f"{edu.degree} in {edu.field or ''}".strip() for edu in profile.education)
    experience = '\n'.join(
        f"- {exp.role} at {exp.company} ({_format_years(exp.years)} years)" for exp in profile.experience
    )
    name = profile.user.name if profile.user else 'N/A'
    return f"""
Analyze this candidate profile and provide insights:

Name: {name}
Skills: {', '.join(skills) or 'None'}
Experience: {_format_years(profile.total_experience_years or 0)} years
Education: {education or 'None'}
Projects: {len(profile.projects)} projects

Experience Details:
{experience or 'None'}

Provide:
1. Top 5-7 extracted skills
2. Brief experience summary (2-3 sentences)
3. Top 3 strengths
4. 2-3 areas for improvement
5. Overall professional summary (2 sentences)

Format as JSON with fields: skillExtraction, experienceSummary, strengths, weakAreas, overallSummary
"""


def mock_summary(profile) -> Dict[str, Any]:
    """Deterministic summary built from the profile itself; not persisted"""
    skills = profile.skill_names
    years = _format_years(profile.total_experience_years or 0)
    return {
        'skillExtraction': skills[:7],
        'experienceSummary': f"Professional with {years} years of experience in {skills[0] if skills else 'technology'}.",
        'strengths': [
            f"{years}+ years of experience",
            f"{len(skills)} technical skills",
            f"{len(profile.projects)} completed projects",
        ],
        'weakAreas': [
            'Profile could benefit from more detailed project descriptions',
            'Consider adding certifications',
        ],
        'overallSummary': f"Skilled professional with expertise in {', '.join(skills[:3]) or 'various technologies'}.",
        'generatedAt': datetime.utcnow().isoformat(),
    }


def _format_years(value) -> str:
    value = float(value or 0)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def _string_items(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else str(item) for item in value if item is not None]


def _text(value: Optional[Any]) -> str:
    return value.strip() if isinstance(value, str) else ''
