from .db import db
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash


ROLES = ('job_seeker', 'recruiter', 'admin')
BASE_PROFILE_SCORE = 10


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='job_seeker')  # 'job_seeker', 'recruiter', 'admin'
    phone = db.Column(db.String(50))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    last_login = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    candidate_profile = db.relationship('CandidateProfile', backref='user', uselist=False, cascade='all, delete-orphan')
    recruiter_profile = db.relationship('RecruiterProfile', backref='user', uselist=False, cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'phone': self.phone,
            'is_active': self.is_active,
            'last_login': _iso(self.last_login),
            'created_at': _iso(self.created_at)
        }


class CandidateProfile(db.Model):
    __tablename__ = "candidate_profiles"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True)
    bio = db.Column(db.Text)
    location = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    linkedin_url = db.Column(db.String(500))
    github_url = db.Column(db.String(500))
    portfolio_url = db.Column(db.String(500))
    cv_url = db.Column(db.String(500))
    cv_file_name = db.Column(db.String(255))
    expected_salary = db.Column(db.Float)
    certifications = db.Column(db.JSON, default=list)  # list of certification names
    languages = db.Column(db.JSON, default=list)
    total_experience_years = db.Column(db.Float, default=0, nullable=False)
    profile_score = db.Column(db.Integer, default=BASE_PROFILE_SCORE, nullable=False)
    # AI-generated insight block: skillExtraction, experienceSummary, strengths,
    # weakAreas, overallSummary, generatedAt
    ai_summary = db.Column(db.JSON, nullable=True)
    is_open_to_work = db.Column(db.Boolean, default=True, nullable=False)
    profile_views = db.Column(db.Integer, default=0, nullable=False)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships, kept in insertion order
    skills = db.relationship('CandidateSkill', backref='profile', lazy=True, cascade='all, delete-orphan',
                             order_by='CandidateSkill.id')
    experience = db.relationship('CandidateExperience', backref='profile', lazy=True, cascade='all, delete-orphan',
                                 order_by='CandidateExperience.id')
    education = db.relationship('CandidateEducation', backref='profile', lazy=True, cascade='all, delete-orphan',
                                order_by='CandidateEducation.id')
    projects = db.relationship('CandidateProject', backref='profile', lazy=True, cascade='all, delete-orphan',
                               order_by='CandidateProject.id')
    preferred_job_types = db.relationship('CandidateJobType', backref='profile', lazy=True,
                                          cascade='all, delete-orphan', order_by='CandidateJobType.id')

    @property
    def skill_names(self):
        return [skill.name for skill in self.skills]

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.user.name if self.user else None,
            'email': self.user.email if self.user else None,
            'skills': self.skill_names,
            'experience': [exp.to_dict() for exp in self.experience],
            'education': [edu.to_dict() for edu in self.education],
            'projects': [project.to_dict() for project in self.projects],
            'certifications': self.certifications or [],
            'languages': self.languages or [],
            'bio': self.bio,
            'location': self.location,
            'phone': self.phone,
            'linkedin_url': self.linkedin_url,
            'github_url': self.github_url,
            'portfolio_url': self.portfolio_url,
            'cv_url': self.cv_url,
            'cv_file_name': self.cv_file_name,
            'expected_salary': self.expected_salary,
            'preferred_job_types': [job_type.name for job_type in self.preferred_job_types],
            'total_experience_years': self.total_experience_years,
            'profile_score': self.profile_score,
            'ai_summary': self.ai_summary,
            'is_open_to_work': self.is_open_to_work,
            'profile_views': self.profile_views,
            'last_updated': _iso(self.last_updated),
            'created_at': _iso(self.created_at)
        }


class CandidateSkill(db.Model):
    __tablename__ = "candidate_skills"
    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class CandidateExperience(db.Model):
    __tablename__ = "candidate_experience"
    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False, index=True)
    company = db.Column(db.String(255), nullable=False, default='')
    role = db.Column(db.String(255), nullable=False, default='')
    years = db.Column(db.Float, default=0, nullable=False)
    description = db.Column(db.Text)
    start_date = db.Column(db.String(50))
    end_date = db.Column(db.String(50))
    is_current = db.Column(db.Boolean, default=False)

    def to_dict(self):
        return {
            'company': self.company,
            'role': self.role,
            'years': self.years,
            'description': self.description,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'is_current': bool(self.is_current)
        }


class CandidateEducation(db.Model):
    __tablename__ = "candidate_education"
    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False, index=True)
    institution = db.Column(db.String(255), nullable=False, default='')
    degree = db.Column(db.String(255), nullable=False, default='')
    field = db.Column(db.String(255))
    graduation_year = db.Column(db.Integer)
    grade = db.Column(db.String(50))

    def to_dict(self):
        return {
            'institution': self.institution,
            'degree': self.degree,
            'field': self.field,
            'graduation_year': self.graduation_year,
            'grade': self.grade
        }


class CandidateProject(db.Model):
    __tablename__ = "candidate_projects"
    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    technologies = db.Column(db.JSON, default=list)
    url = db.Column(db.String(500))
    github_url = db.Column(db.String(500))

    def to_dict(self):
        return {
            'name': self.name,
            'description': self.description,
            'technologies': self.technologies or [],
            'url': self.url,
            'github_url': self.github_url
        }


class CandidateJobType(db.Model):
    __tablename__ = "candidate_job_types"
    id = db.Column(db.Integer, primary_key=True)
    profile_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False)  # e.g. 'full-time', 'part-time', 'contract', 'remote'


class RecruiterProfile(db.Model):
    __tablename__ = "recruiter_profiles"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True)
    company_name = db.Column(db.String(255), nullable=False)
    company_website = db.Column(db.String(500))
    company_size = db.Column(db.String(50))
    industry = db.Column(db.String(255))
    designation = db.Column(db.String(255), default='Recruiter')
    company_logo = db.Column(db.String(500))
    is_verified = db.Column(db.Boolean, default=False, nullable=False)
    total_searches = db.Column(db.Integer, default=0, nullable=False)
    candidates_contacted = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    saved_candidates = db.relationship('SavedCandidate', backref='recruiter', lazy=True,
                                       cascade='all, delete-orphan', order_by='SavedCandidate.id')
    search_history = db.relationship('RecruiterSearchHistory', backref='recruiter', lazy=True,
                                     cascade='all, delete-orphan', order_by='RecruiterSearchHistory.id')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'company_name': self.company_name,
            'company_website': self.company_website,
            'company_size': self.company_size,
            'industry': self.industry,
            'designation': self.designation,
            'company_logo': self.company_logo,
            'is_verified': self.is_verified,
            'total_searches': self.total_searches,
            'candidates_contacted': self.candidates_contacted,
            'saved_candidates_count': len(self.saved_candidates)
        }


class SavedCandidate(db.Model):
    """A candidate bookmarked by a recruiter, unique per recruiter"""
    __tablename__ = "saved_candidates"
    __table_args__ = (
        db.UniqueConstraint('recruiter_id', 'candidate_id', name='uq_saved_candidate'),
    )
    id = db.Column(db.Integer, primary_key=True)
    recruiter_id = db.Column(db.Integer, db.ForeignKey("recruiter_profiles.id"), nullable=False, index=True)
    candidate_id = db.Column(db.Integer, db.ForeignKey("candidate_profiles.id"), nullable=False)
    notes = db.Column(db.Text)
    tags = db.Column(db.JSON, default=list)
    saved_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    candidate = db.relationship('CandidateProfile')

    def to_dict(self):
        return {
            'candidate_id': self.candidate_id,
            'notes': self.notes,
            'tags': self.tags or [],
            'saved_at': _iso(self.saved_at)
        }


class RecruiterSearchHistory(db.Model):
    """One recorded candidate search; at most 50 rows are kept per recruiter"""
    __tablename__ = "recruiter_search_history"
    id = db.Column(db.Integer, primary_key=True)
    recruiter_id = db.Column(db.Integer, db.ForeignKey("recruiter_profiles.id"), nullable=False, index=True)
    search_query = db.Column(db.Text, nullable=False)
    filters = db.Column(db.JSON)
    results_count = db.Column(db.Integer, default=0, nullable=False)
    searched_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'query': self.search_query,
            'filters': self.filters or {},
            'results_count': self.results_count,
            'searched_at': _iso(self.searched_at)
        }
