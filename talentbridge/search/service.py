"""
Candidate search: composite filtering, sorting and pagination over
open-to-work candidate profiles, plus the shortlist and statistics queries.
"""
import math
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, func

from talentbridge.db import db
from talentbridge.exceptions import ValidationError
from talentbridge.models import (
    CandidateProfile,
    CandidateSkill,
    CandidateExperience,
    CandidateEducation,
    CandidateJobType,
)
from talentbridge.simple_logger import get_logger

logger = get_logger("search")

SORT_COLUMNS = {
    'profile_score': CandidateProfile.profile_score,
    'experience': CandidateProfile.total_experience_years,
    'recent': CandidateProfile.last_updated,
}
MAX_LIMIT = 100
MAX_EXPERIENCE_FILTER = 50
MAX_OFFSET = 2 ** 31


@dataclass
class SearchCriteria:
    query: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    location: Optional[str] = None
    min_experience: Optional[float] = None
    max_experience: Optional[float] = None
    min_salary: Optional[float] = None
    max_salary: Optional[float] = None
    education: Optional[str] = None
    min_profile_score: Optional[float] = None
    job_types: List[str] = field(default_factory=list)
    page: int = 1
    limit: int = 20
    sort_by: str = 'profile_score'
    sort_order: str = 'desc'

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SearchCriteria':
        """Build and validate criteria from a request body"""
        data = data or {}
        if not isinstance(data, dict):
            raise ValidationError("Search criteria must be a JSON object")

        criteria = cls(
            query=_optional_text(data.get('query'), 'query'),
            skills=_text_list(data.get('skills'), 'skills'),
            location=_optional_text(data.get('location'), 'location'),
            min_experience=_optional_number(data.get('min_experience'), 'min_experience'),
            max_experience=_optional_number(data.get('max_experience'), 'max_experience'),
            min_salary=_optional_number(data.get('min_salary'), 'min_salary'),
            max_salary=_optional_number(data.get('max_salary'), 'max_salary'),
            education=_optional_text(data.get('education'), 'education'),
            min_profile_score=_optional_number(data.get('min_profile_score'), 'min_profile_score'),
            job_types=_text_list(data.get('job_types'), 'job_types'),
            page=_integer(data.get('page', 1), 'page'),
            limit=_integer(data.get('limit', 20), 'limit'),
            sort_by=_optional_text(data.get('sort_by'), 'sort_by') or 'profile_score',
            sort_order=_optional_text(data.get('sort_order'), 'sort_order') or 'desc',
        )
        criteria.validate()
        return criteria

    def validate(self):
        if self.page < 1:
            raise ValidationError("'page' must be >= 1")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValidationError(f"'limit' must be between 1 and {MAX_LIMIT}")
        if (self.page - 1) * self.limit > MAX_OFFSET:
            raise ValidationError("'page' is beyond the last possible result")
        if self.min_experience is not None and self.min_experience < 0:
            raise ValidationError("'min_experience' must be >= 0")
        if self.max_experience is not None and self.max_experience > MAX_EXPERIENCE_FILTER:
            raise ValidationError(f"'max_experience' must be <= {MAX_EXPERIENCE_FILTER}")
        if self.min_profile_score is not None and not 0 <= self.min_profile_score <= 100:
            raise ValidationError("'min_profile_score' must be between 0 and 100")
        if self.sort_by not in SORT_COLUMNS:
            raise ValidationError(f"'sort_by' must be one of {', '.join(SORT_COLUMNS)}")
        if self.sort_order not in ('asc', 'desc'):
            raise ValidationError("'sort_order' must be 'asc' or 'desc'")

    def to_dict(self) -> Dict[str, Any]:
        """Only the criteria that were actually supplied"""
        return {key: value for key, value in asdict(self).items() if value not in (None, [], '')}


class CandidateSearchEngine:
    """Filters, sorts and paginates candidate profiles"""

    def search(self, criteria: SearchCriteria) -> Dict[str, Any]:
        query = self.build_query(criteria)

        sort_column = SORT_COLUMNS[criteria.sort_by]
        ordering = sort_column.asc() if criteria.sort_order == 'asc' else sort_column.desc()
        # id tiebreak keeps pages disjoint
        query = query.order_by(ordering, CandidateProfile.id.asc())

        pagination = query.paginate(page=criteria.page, per_page=criteria.limit, error_out=False)
        total = pagination.total or 0
        total_pages = math.ceil(total / criteria.limit)

        logger.info(f"Candidate search matched {total} profiles (page {criteria.page}/{total_pages})")
        return {
            'candidates': pagination.items,
            'pagination': {
                'total': total,
                'page': criteria.page,
                'limit': criteria.limit,
                'total_pages': total_pages,
                'has_next': criteria.page < total_pages,
                'has_prev': criteria.page > 1,
            }
        }

    def build_query(self, criteria: SearchCriteria):
        """AND of every supplied criterion over open-to-work profiles"""
        query = CandidateProfile.query.filter(CandidateProfile.is_open_to_work.is_(True))

        if criteria.query:
            text = criteria.query
            query = query.filter(or_(
                CandidateProfile.skills.any(_contains(CandidateSkill.name, text)),
                CandidateProfile.experience.any(or_(
                    _contains(CandidateExperience.role, text),
                    _contains(CandidateExperience.company, text),
                )),
                CandidateProfile.education.any(or_(
                    _contains(CandidateEducation.degree, text),
                    _contains(CandidateEducation.field, text),
                )),
                _contains(CandidateProfile.bio, text),
            ))

        if criteria.skills:
            query = query.filter(skills_filter(criteria.skills))

        if criteria.location:
            query = query.filter(_contains(CandidateProfile.location, criteria.location))

        if criteria.min_experience is not None:
            query = query.filter(CandidateProfile.total_experience_years >= criteria.min_experience)
        if criteria.max_experience is not None:
            query = query.filter(CandidateProfile.total_experience_years <= criteria.max_experience)

        if criteria.min_salary is not None:
            query = query.filter(CandidateProfile.expected_salary >= criteria.min_salary)
        if criteria.max_salary is not None:
            query = query.filter(CandidateProfile.expected_salary <= criteria.max_salary)

        if criteria.education:
            query = query.filter(
                CandidateProfile.education.any(_contains(CandidateEducation.degree, criteria.education))
            )

        if criteria.min_profile_score is not None:
            query = query.filter(CandidateProfile.profile_score >= criteria.min_profile_score)

        if criteria.job_types:
            wanted = [job_type.strip().lower() for job_type in criteria.job_types]
            query = query.filter(
                CandidateProfile.preferred_job_types.any(func.lower(CandidateJobType.name).in_(wanted))
            )

        return query

    def top_candidates(self, limit: int = 10) -> List[CandidateProfile]:
        return (
            CandidateProfile.query
            .filter(CandidateProfile.is_open_to_work.is_(True))
            .order_by(CandidateProfile.profile_score.desc(), CandidateProfile.id.asc())
            .limit(limit)
            .all()
        )

    def by_skills(self, skills: List[str], limit: int = 20) -> List[CandidateProfile]:
        skills = [skill for skill in skills if skill and skill.strip()]
        if not skills:
            return []
        return (
            CandidateProfile.query
            .filter(CandidateProfile.is_open_to_work.is_(True), skills_filter(skills))
            .order_by(CandidateProfile.profile_score.desc(), CandidateProfile.id.asc())
            .limit(limit)
            .all()
        )

    def statistics(self) -> Dict[str, Any]:
        total_candidates = db.session.query(func.count(CandidateProfile.id)).scalar() or 0
        open_to_work = (
            db.session.query(func.count(CandidateProfile.id))
            .filter(CandidateProfile.is_open_to_work.is_(True))
            .scalar() or 0
        )
        avg_score, avg_experience = db.session.query(
            func.avg(CandidateProfile.profile_score),
            func.avg(CandidateProfile.total_experience_years)
        ).one()

        skill_count = func.count(CandidateSkill.id)
        top_skills = (
            db.session.query(CandidateSkill.name, skill_count)
            .group_by(CandidateSkill.name)
            .order_by(skill_count.desc(), CandidateSkill.name.asc())
            .limit(20)
            .all()
        )

        location_count = func.count(CandidateProfile.id)
        top_locations = (
            db.session.query(CandidateProfile.location, location_count)
            .filter(CandidateProfile.location.isnot(None), CandidateProfile.location != '')
            .group_by(CandidateProfile.location)
            .order_by(location_count.desc(), CandidateProfile.location.asc())
            .limit(10)
            .all()
        )

        return {
            'total_candidates': total_candidates,
            'open_to_work': open_to_work,
            'average_profile_score': round(float(avg_score or 0), 2),
            'average_experience': round(float(avg_experience or 0), 2),
            'top_skills': [{'skill': name, 'count': count} for name, count in top_skills],
            'top_locations': [{'location': name, 'count': count} for name, count in top_locations],
        }


def skills_filter(skills: List[str]):
    """Any requested skill is a case-insensitive substring of any candidate skill"""
    return or_(*[
        CandidateProfile.skills.any(_contains(CandidateSkill.name, skill.strip()))
        for skill in skills
    ])


def _contains(column, text: str):
    escaped = text.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return column.ilike(f'%{escaped}%', escape='\\')


def _optional_text(value, name):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string")
    return value.strip() or None


def _text_list(value, name):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(',')
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"'{name}' must be a list of strings")
    return [item.strip() for item in value if item.strip()]


def _optional_number(value, name):
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f"'{name}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a number")


def _integer(value, name):
    if isinstance(value, bool):
        raise ValidationError(f"'{name}' must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"'{name}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be an integer")
