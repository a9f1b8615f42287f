"""
CV text extraction.

Two interchangeable strategies turn raw resume text into ``ProfileData``:
``AIExtractor`` asks the language model for a fixed JSON schema and
``HeuristicExtractor`` uses section-based regular expressions. The AI
strategy falls back to the heuristic one on any failure, so callers always
get a complete payload.
"""
import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from talentbridge.llm.client import parse_json_object
from talentbridge.simple_logger import get_logger

logger = get_logger("resume")

MAX_PROMPT_CHARS = 10000

COMMON_SKILLS = [
    'JavaScript', 'Python', 'Java', 'React', 'Node.js', 'Angular', 'Vue',
    'TypeScript', 'MongoDB', 'SQL', 'AWS', 'Docker', 'Kubernetes',
    'Git', 'REST API', 'GraphQL', 'HTML', 'CSS', 'Tailwind',
]

EXPERIENCE_SECTION_PATTERNS = [
    re.compile(
        r'(?:WORK\s+EXPERIENCE|PROFESSIONAL\s+EXPERIENCE|EMPLOYMENT\s+HISTORY|WORK\s+HISTORY|EXPERIENCE)'
        r'([\s\S]*?)(?=EDUCATION|SKILLS|PROJECTS|CERTIFICATIONS|$)',
        re.IGNORECASE
    ),
    re.compile(
        r'(?:Work\s+Experience|Professional\s+Experience|Employment|Career)'
        r'([\s\S]*?)(?=Education|Skills|Projects|$)',
        re.IGNORECASE
    ),
]

EDUCATION_SECTION_PATTERNS = [
    re.compile(
        r'(?:EDUCATION|ACADEMIC\s+BACKGROUND|EDUCATIONAL\s+QUALIFICATIONS?)'
        r'([\s\S]*?)(?=WORK|EXPERIENCE|SKILLS|PROJECTS|CERTIFICATIONS|$)',
        re.IGNORECASE
    ),
    re.compile(
        r'(?:Education|Academic\s+Background|Qualifications?)'
        r'([\s\S]*?)(?=Work|Experience|Skills|Projects|$)',
        re.IGNORECASE
    ),
]

DATE_PATTERN = re.compile(
    r'(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec|January|February|March|April|May|June|July|'
    r'August|September|October|November|December)[\s,]*\d{4}'
    r'|(?:19|20)\d{2}\s*[-–—]\s*(?:(?:19|20)\d{2}|Present|Current)',
    re.IGNORECASE
)

DEGREE_PATTERN = re.compile(
    r'(Bachelor|Master|PhD|Doctorate|B\.?S\.?C?\.?|M\.?S\.?C?\.?|B\.?A\.?|M\.?A\.?|B\.?Tech|M\.?Tech|'
    r'B\.?E\.?|M\.?E\.?|Diploma|Associate|Degree|High\s+School|Secondary)',
    re.IGNORECASE
)
INSTITUTION_PATTERN = re.compile(r'(University|College|School|Institute|Academy)', re.IGNORECASE)
YEAR_PATTERN = re.compile(r'\b(?:19|20)\d{2}\b')
EMAIL_PATTERN = re.compile(r'[\w.-]+@[\w.-]+\.\w+')
PHONE_PATTERN = re.compile(r'[\d\s\-+()]{10,}')
BLOCK_SEPARATOR = re.compile(r'\n\s*\n')

MAX_ENTRIES = 5

AI_EXTRACTION_PROMPT = """Extract all information from this CV/resume and return ONLY a valid JSON object.

Required JSON structure:
{{
  "name": "Full Name",
  "email": "email@example.com",
  "phone": "+1234567890",
  "location": "City, Country",
  "title": "Current Job Title",
  "bio": "Professional summary in 2-3 sentences",
  "totalYears": 5.5,
  "skills": ["JavaScript", "Python", "React"],
  "experience": [
    {{"role": "Senior Developer", "company": "Tech Company Inc", "years": 2.5, "description": "Key responsibilities and achievements"}}
  ],
  "education": [
    {{"degree": "Bachelor of Science in Computer Science", "institution": "University Name", "field": "Computer Science", "graduationYear": 2020}}
  ],
  "projects": [
    {{"name": "Project Name", "description": "What the project does", "technologies": ["React", "Node.js"]}}
  ],
  "certifications": [
    {{"name": "Certification Name", "issuer": "Issuing Organization", "year": 2023}}
  ]
}}

Rules:
- Extract ALL work experience entries with complete details
- Extract ALL education entries with degrees and schools
- Extract ALL technical skills mentioned
- Use empty array [] if section not found
- Use empty string "" for missing text fields
- Return ONLY the JSON object, no markdown formatting, no explanations

CV TEXT:
{cv_text}"""


@dataclass
class ProfileData:
    """Structured profile fields extracted from a CV; every field is always present"""
    skills: List[str] = field(default_factory=list)
    experience: List[Dict[str, Any]] = field(default_factory=list)
    education: List[Dict[str, Any]] = field(default_factory=list)
    projects: List[Dict[str, Any]] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)
    bio: str = ''
    location: str = ''
    email: str = ''
    phone: str = ''
    total_experience_years: float = 0
    title: str = ''
    name: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class HeuristicExtractor:
    """Regex and section-header based extraction, needs no external service"""

    def extract(self, text: str) -> ProfileData:
        text = text or ''
        lines = [line.strip() for line in text.split('\n') if line.strip()]

        return ProfileData(
            skills=self.extract_skills(text),
            experience=self.extract_experience(text),
            education=self.extract_education(text),
            email=self._first_match(EMAIL_PATTERN, text),
            phone=self._extract_phone(text),
            name=lines[0][:50] if lines else '',
        )

    def extract_skills(self, text: str) -> List[str]:
        lowered = text.lower()
        return [skill for skill in COMMON_SKILLS if skill.lower() in lowered]

    def extract_experience(self, text: str) -> List[Dict[str, Any]]:
        section = self._find_section(text, EXPERIENCE_SECTION_PATTERNS, min_length=20)
        if section is None:
            logger.debug("No work experience section found")
            return []

        experiences = []
        for block in BLOCK_SEPARATOR.split(section):
            if len(experiences) >= MAX_ENTRIES:
                break
            if len(block.strip()) <= 10:
                continue

            lines = [line.strip() for line in block.split('\n') if line.strip()]
            if len(lines) < 2:
                continue

            role = ''
            company = ''
            # the last date line in a block wins
            for i, line in enumerate(lines):
                if DATE_PATTERN.search(line):
                    if i > 0:
                        role = lines[i - 1]
                    if i > 1:
                        company = lines[i - 2]
                    elif i == 1:
                        company = lines[0]

            if not role:
                role = lines[0]
                company = DATE_PATTERN.sub('', lines[1]).strip() or lines[1]

            if 3 < len(role) < 150:
                experiences.append({
                    'role': role[:100],
                    'company': (company or 'Company')[:100],
                    # duration is not inferred from the text
                    'years': 1,
                    'description': ' '.join(lines[2:5])[:200],
                })

        return experiences

    def extract_education(self, text: str) -> List[Dict[str, Any]]:
        section = self._find_section(text, EDUCATION_SECTION_PATTERNS, min_length=10)
        if section is None:
            logger.debug("No education section found")
            return []

        education = []
        for block in BLOCK_SEPARATOR.split(section):
            if len(education) >= MAX_ENTRIES:
                break
            if len(block.strip()) <= 5:
                continue

            lines = [line.strip() for line in block.split('\n') if line.strip()]
            if not lines:
                continue

            degree = next((line for line in lines if DEGREE_PATTERN.search(line)), '')
            institution = next(
                (line for line in lines if INSTITUTION_PATTERN.search(line) and line != degree), ''
            )
            if not institution and len(lines) > 1:
                institution = lines[1]

            years = YEAR_PATTERN.findall(block)
            year = int(years[-1]) if years else datetime.now().year

            if not degree:
                degree = lines[0]

            if len(degree) > 2:
                education.append({
                    'degree': degree[:100],
                    'institution': (institution or 'University')[:100],
                    'field': '',
                    'graduation_year': year,
                })

        return education

    @staticmethod
    def _find_section(text: str, patterns, min_length: int) -> Optional[str]:
        for pattern in patterns:
            match = pattern.search(text)
            if match and len(match.group(1).strip()) > min_length:
                return match.group(1)
        return None

    @staticmethod
    def _first_match(pattern, text: str) -> str:
        match = pattern.search(text)
        return match.group(0) if match else ''

    @staticmethod
    def _extract_phone(text: str) -> str:
        for match in PHONE_PATTERN.finditer(text):
            candidate = match.group(0).strip()
            if any(char.isdigit() for char in candidate):
                return candidate
        return ''


class AIExtractor:
    """Language-model extraction with heuristic fallback"""

    def __init__(self, llm_client, fallback: Optional[HeuristicExtractor] = None):
        self.llm_client = llm_client
        self.fallback = fallback or HeuristicExtractor()

    def extract(self, text: str) -> ProfileData:
        try:
            prompt = AI_EXTRACTION_PROMPT.format(cv_text=(text or '')[:MAX_PROMPT_CHARS])
            raw = parse_json_object(self.llm_client.generate(prompt))
            data = coerce_profile_data(raw)
            logger.info(
                f"AI extraction: {len(data.skills)} skills, {len(data.experience)} experience, "
                f"{len(data.education)} education, {len(data.projects)} projects"
            )
            return data
        except Exception as e:
            logger.warning(f"AI CV extraction failed, falling back to heuristics: {e}")
            return self.fallback.extract(text)


def build_extractor(llm_client=None):
    """Pick the extraction strategy from LLM availability"""
    if llm_client is None:
        return HeuristicExtractor()
    return AIExtractor(llm_client)


def coerce_profile_data(raw: Dict[str, Any]) -> ProfileData:
    """Validate a loosely typed model response field by field"""
    return ProfileData(
        skills=[s.strip() for s in _as_list(raw.get('skills')) if isinstance(s, str) and s.strip()],
        experience=[
            {
                'role': _as_str(item.get('role')),
                'company': _as_str(item.get('company')),
                'years': _as_number(item.get('years')),
                'description': _as_str(item.get('description')),
            }
            for item in _as_list(raw.get('experience')) if isinstance(item, dict)
        ],
        education=[
            {
                'degree': _as_str(item.get('degree')),
                'institution': _as_str(item.get('institution')),
                'field': _as_str(item.get('field')),
                'graduation_year': int(_as_number(item.get('graduationYear'))) or None,
            }
            for item in _as_list(raw.get('education')) if isinstance(item, dict)
        ],
        projects=[
            {
                'name': _as_str(item.get('name') or item.get('title')),
                'description': _as_str(item.get('description')),
                'technologies': [t for t in _as_list(item.get('technologies')) if isinstance(t, str)],
            }
            for item in _as_list(raw.get('projects')) if isinstance(item, dict)
        ],
        certifications=[
            name for name in (
                _as_str(item.get('name')) if isinstance(item, dict) else _as_str(item)
                for item in _as_list(raw.get('certifications'))
            ) if name
        ],
        bio=_as_str(raw.get('bio') or raw.get('summary')),
        location=_as_str(raw.get('location')),
        email=_as_str(raw.get('email')),
        phone=_as_str(raw.get('phone')),
        total_experience_years=_as_number(raw.get('totalYears')),
        title=_as_str(raw.get('title')),
        name=_as_str(raw.get('name')),
    )


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _as_str(value) -> str:
    if value is None:
        return ''
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ''


def _as_number(value) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(float(value), 0)
    if isinstance(value, str):
        try:
            return max(float(value.strip()), 0)
        except ValueError:
            return 0
    return 0
