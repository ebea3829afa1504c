import enum

from sqlalchemy.orm import relationship
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from database import Base


class QuestionType(enum.Enum):
    TEXT = 1
    MULTIPLE_CHOICE = 2
    CHECKBOX = 3
    DROPDOWN = 4
    TEXT_AREA = 5
    FILE_UPLOAD = 6
    DATE = 7


class ApplicationStatus(enum.Enum):
    PENDING = 1
    SHORTLISTED = 2
    INTERVIEW_SCHEDULED = 3
    OFFER_SENT = 4
    HIRED = 5
    REJECTED = 6


class JobSeeker(Base):
    __tablename__ = "job_seekers"

    id = Column(String(10), primary_key=True, index=True)
    full_name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    is_email_verified = Column(Boolean, default=False, nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    experience_level = Column(String(50), nullable=True)
    profile_photo_file_name = Column(String, nullable=True)
    resume_file_name = Column(String, nullable=True)
    summary = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    skills = relationship("JobSeekerSkill", back_populates="job_seeker", cascade="all, delete-orphan")
    experiences = relationship("WorkExperience", back_populates="job_seeker", cascade="all, delete-orphan")
    educations = relationship("Education", back_populates="job_seeker", cascade="all, delete-orphan")
    languages = relationship("Language", back_populates="job_seeker", cascade="all, delete-orphan")
    licenses = relationship("License", back_populates="job_seeker", cascade="all, delete-orphan")
    applications = relationship("Application", back_populates="job_seeker")


class JobSeekerSkill(Base):
    __tablename__ = "job_seeker_skills"

    id = Column(String(10), primary_key=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), index=True, nullable=False)
    skill_name = Column(String(100))

    job_seeker = relationship("JobSeeker", back_populates="skills")


class WorkExperience(Base):
    __tablename__ = "work_experiences"

    id = Column(String(10), primary_key=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), index=True, nullable=False)
    company = Column(String(100))
    title = Column(String(100))

    job_seeker = relationship("JobSeeker", back_populates="experiences")


class Education(Base):
    __tablename__ = "educations"

    id = Column(String(10), primary_key=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), index=True, nullable=False)
    institution = Column(String(100))
    qualification = Column(String(100))

    job_seeker = relationship("JobSeeker", back_populates="educations")


class Language(Base):
    __tablename__ = "languages"

    id = Column(String(10), primary_key=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), index=True, nullable=False)
    name = Column(String(50))
    proficiency = Column(String(50), nullable=True)

    job_seeker = relationship("JobSeeker", back_populates="languages")


class License(Base):
    __tablename__ = "licenses"

    id = Column(String(10), primary_key=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), index=True, nullable=False)
    name = Column(String(100))
    issuer = Column(String(100), nullable=True)

    job_seeker = relationship("JobSeeker", back_populates="licenses")


class QuestionSet(Base):
    __tablename__ = "question_sets"

    id = Column(String(10), primary_key=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    questions = relationship("Question", back_populates="question_set", order_by="Question.order")
    jobs = relationship("Job", back_populates="question_set")


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(10), primary_key=True, index=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    question_set_id = Column(String(10), ForeignKey("question_sets.id"), nullable=True)
    posted_at = Column(DateTime(timezone=True), server_default=func.now())

    question_set = relationship("QuestionSet", back_populates="jobs")
    # Job-level questions, used when no question set is assigned
    questions = relationship("Question", back_populates="job", order_by="Question.order")
    applications = relationship("Application", back_populates="job")


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(10), primary_key=True)
    text = Column(String(500), nullable=False)
    type = Column(Enum(QuestionType), default=QuestionType.TEXT, nullable=False)
    is_required = Column(Boolean, default=True, nullable=False)
    options = Column(Text, nullable=True)  # comma-delimited choices
    max_length = Column(Integer, nullable=True)
    order = Column(Integer, nullable=False, default=1)
    question_set_id = Column(String(10), ForeignKey("question_sets.id"), nullable=True, index=True)
    job_id = Column(String(10), ForeignKey("jobs.id"), nullable=True, index=True)

    question_set = relationship("QuestionSet", back_populates="questions")
    job = relationship("Job", back_populates="questions")


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(10), primary_key=True, index=True)
    job_id = Column(String(10), ForeignKey("jobs.id"), nullable=False, index=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    status = Column(Enum(ApplicationStatus), default=ApplicationStatus.PENDING, nullable=False)
    applied_at = Column(DateTime(timezone=True), server_default=func.now())

    job = relationship("Job", back_populates="applications")
    job_seeker = relationship("JobSeeker", back_populates="applications")
    question_responses = relationship(
        "QuestionResponse", back_populates="application", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("job_id", "job_seeker_id", name="uq_applications_job_seeker"),
    )


class QuestionResponse(Base):
    __tablename__ = "question_responses"

    id = Column(String(10), primary_key=True)
    answer = Column(Text, nullable=False, default="")
    responded_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    question_id = Column(String(10), ForeignKey("questions.id"), nullable=False)
    application_id = Column(String(10), ForeignKey("applications.id"), nullable=False, index=True)
    job_seeker_id = Column(String(10), ForeignKey("job_seekers.id"), nullable=False)

    question = relationship("Question")
    application = relationship("Application", back_populates="question_responses")

    # At most one response per question per application
    __table_args__ = (
        UniqueConstraint("application_id", "question_id", name="uq_question_responses_application_question"),
    )


class IdSequence(Base):
    """Last issued number per textual id prefix (e.g. "QRS" -> 42)."""

    __tablename__ = "id_sequences"

    prefix = Column(String(10), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
