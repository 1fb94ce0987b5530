"""
Resume document renderer.

Builds an ordered section description from the builder data, then lays it out
as an A4 PDF with reportlab.
"""
import html
import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import HRFlowable, ListFlowable, ListItem, Paragraph, SimpleDocTemplate, Spacer
from sqlalchemy.orm import Session

from careerpath.db.models.user import User
from careerpath.db.models.profile import Profile, Experience, Certification

logger = logging.getLogger(__name__)

BULLET_PREFIX = re.compile(r"^[•\-\*\s]+")
DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%b %Y", "%B %Y", "%m/%Y", "%Y")

ACCENT = colors.HexColor("#2563eb")
MUTED = colors.HexColor("#4b5563")
TEXT = colors.HexColor("#111827")


class ExperienceData(BaseModel):
    type: str = "job"
    title: str
    organization: str
    description: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class CertificationData(BaseModel):
    name: str
    issuer: Optional[str] = None
    date_issued: Optional[str] = None


class ResumeData(BaseModel):
    """Everything the builder wizard collected for one user."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin_link: Optional[str] = None
    headline: Optional[str] = None
    about_text: Optional[str] = None
    high_school: Optional[str] = None
    graduation_year: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experiences: List[ExperienceData] = Field(default_factory=list)
    certifications: List[CertificationData] = Field(default_factory=list)


@dataclass
class SectionEntry:
    heading: Optional[str] = None
    subheading: Optional[str] = None
    meta: Optional[str] = None
    text: Optional[str] = None
    bullets: List[str] = field(default_factory=list)


Section = Tuple[str, List[SectionEntry]]


def load_resume_data(db: Session, user_id: str) -> ResumeData:
    """
    Read the builder content for a user.

    Raises:
        LookupError: If the user does not exist
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise LookupError(f"User not found: user_id={user_id}")

    profile = db.query(Profile).filter(Profile.user_id == user_id).first()
    experiences = db.query(Experience).filter(Experience.user_id == user_id).all()
    certifications = db.query(Certification).filter(Certification.user_id == user_id).all()

    return ResumeData(
        full_name=user.full_name,
        email=user.email,
        linkedin_link=user.linkedin_link,
        phone=profile.phone if profile else None,
        location=profile.location if profile else None,
        headline=profile.headline if profile else None,
        about_text=profile.about_text if profile else None,
        high_school=profile.high_school if profile else None,
        graduation_year=profile.graduation_year if profile else None,
        skills=list(profile.skills or []) if profile else [],
        experiences=[
            ExperienceData(
                type=e.type or "job",
                title=e.title,
                organization=e.organization,
                description=e.description,
                start_date=e.start_date,
                end_date=e.end_date,
            )
            for e in experiences
        ],
        certifications=[
            CertificationData(name=c.name, issuer=c.issuer, date_issued=c.date_issued)
            for c in certifications
        ],
    )


def split_bullets(text: Optional[str]) -> List[str]:
    """One bullet per non-blank line, with leading bullet markers stripped."""
    if not text:
        return []
    bullets = []
    for line in text.splitlines():
        cleaned = BULLET_PREFIX.sub("", line).strip()
        if cleaned:
            bullets.append(cleaned)
    return bullets


def _date_range(start: Optional[str], end: Optional[str]) -> Optional[str]:
    if not start:
        return None
    return f"{start} - {end or 'Present'}"


def parse_start_date(value: Optional[str]) -> Optional[date]:
    """Parse a builder date such as `2024-01`, `Sep 2021` or `2023`."""
    if not value:
        return None
    cleaned = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def _sorted_experiences(experiences: List[ExperienceData]) -> List[ExperienceData]:
    # Most recent first; unparseable dates keep input order after them, undated entries go last
    dated = [(parse_start_date(e.start_date), e) for e in experiences if e.start_date]
    parsed = [pair for pair in dated if pair[0] is not None]
    unparsed = [e for d, e in dated if d is None]
    undated = [e for e in experiences if not e.start_date]
    return [e for _, e in sorted(parsed, key=lambda pair: pair[0], reverse=True)] + unparsed + undated


def build_sections(data: ResumeData) -> List[Section]:
    """Ordered `(title, entries)` pairs; sections without content are omitted."""
    sections: List[Section] = []

    if data.about_text and data.about_text.strip():
        sections.append(("Professional Summary", [SectionEntry(text=data.about_text.strip())]))

    if data.experiences:
        entries = []
        for exp in _sorted_experiences(data.experiences):
            entries.append(SectionEntry(
                heading=exp.title,
                meta=_date_range(exp.start_date, exp.end_date),
                subheading=f"{exp.organization} • {exp.type.capitalize()}",
                bullets=split_bullets(exp.description),
            ))
        sections.append(("Experience", entries))

    if data.high_school:
        sections.append(("Education", [SectionEntry(
            heading=data.high_school,
            meta=f"Graduated: {data.graduation_year}" if data.graduation_year else None,
        )]))

    if data.certifications:
        sections.append(("Certifications", [
            SectionEntry(heading=c.name, meta=c.date_issued, subheading=c.issuer)
            for c in data.certifications
        ]))

    skills = [s.strip() for s in data.skills if s and s.strip()]
    if skills:
        sections.append(("Skills", [SectionEntry(bullets=skills)]))

    return sections


def display_name(data: ResumeData) -> str:
    return data.full_name or "Your Name"


def contact_line(data: ResumeData) -> str:
    parts = [data.location, data.email, data.phone, data.linkedin_link]
    return " | ".join(p for p in parts if p)


def _styles() -> dict:
    sample = getSampleStyleSheet()
    return {
        "name": ParagraphStyle(
            "name",
            parent=sample["Title"],
            fontName="Helvetica-Bold",
            fontSize=22,
            leading=26,
            alignment=TA_CENTER,
            textColor=TEXT,
            spaceAfter=2,
        ),
        "headline": ParagraphStyle(
            "headline",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=11,
            leading=14,
            alignment=TA_CENTER,
            textColor=ACCENT,
            spaceAfter=2,
        ),
        "contact": ParagraphStyle(
            "contact",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=9.5,
            leading=12,
            alignment=TA_CENTER,
            textColor=MUTED,
            spaceAfter=6,
        ),
        "section": ParagraphStyle(
            "section",
            parent=sample["Heading3"],
            fontName="Helvetica-Bold",
            fontSize=11.5,
            leading=14,
            textColor=ACCENT,
            spaceBefore=8,
            spaceAfter=3,
        ),
        "entry": ParagraphStyle(
            "entry",
            parent=sample["Normal"],
            fontName="Helvetica-Bold",
            fontSize=10.5,
            leading=13,
            textColor=TEXT,
        ),
        "meta": ParagraphStyle(
            "meta",
            parent=sample["Normal"],
            fontName="Helvetica-Oblique",
            fontSize=9.5,
            leading=12,
            textColor=MUTED,
        ),
        "body": ParagraphStyle(
            "body",
            parent=sample["Normal"],
            fontName="Helvetica",
            fontSize=10,
            leading=13,
            textColor=TEXT,
            spaceAfter=3,
        ),
    }


def _entry_flowables(entry: SectionEntry, styles: dict) -> list:
    flowables = []
    if entry.heading:
        heading = html.escape(entry.heading)
        if entry.meta:
            heading += f' <font name="Helvetica" color="#4b5563">  {html.escape(entry.meta)}</font>'
        flowables.append(Paragraph(heading, styles["entry"]))
    elif entry.meta:
        flowables.append(Paragraph(html.escape(entry.meta), styles["meta"]))
    if entry.subheading:
        flowables.append(Paragraph(html.escape(entry.subheading), styles["meta"]))
    if entry.text:
        flowables.append(Paragraph(html.escape(entry.text), styles["body"]))
    if entry.bullets:
        flowables.append(ListFlowable(
            [ListItem(Paragraph(html.escape(b), styles["body"]), leftIndent=12) for b in entry.bullets],
            bulletType="bullet",
            start="•",
            leftIndent=12,
        ))
    flowables.append(Spacer(1, 4))
    return flowables


def render_resume_pdf(data: ResumeData) -> bytes:
    """Render the resume to PDF bytes. Long content paginates."""
    styles = _styles()
    output = io.BytesIO()
    name = display_name(data)
    doc = SimpleDocTemplate(
        output,
        pagesize=A4,
        leftMargin=44,
        rightMargin=44,
        topMargin=42,
        bottomMargin=34,
        title=f"{data.full_name} Resume" if data.full_name else "My Resume",
        author="CareerPath",
    )

    story = [Paragraph(html.escape(name.upper()), styles["name"])]
    if data.headline:
        story.append(Paragraph(html.escape(data.headline), styles["headline"]))
    contact = contact_line(data)
    if contact:
        story.append(Paragraph(html.escape(contact), styles["contact"]))

    sections = build_sections(data)
    for title, entries in sections:
        story.append(Paragraph(html.escape(title.upper()), styles["section"]))
        story.append(HRFlowable(width="100%", thickness=0.8, color=ACCENT, spaceBefore=0, spaceAfter=4))
        for entry in entries:
            story.extend(_entry_flowables(entry, styles))

    doc.build(story)
    pdf_bytes = output.getvalue()
    logger.info(f"Rendered resume PDF: sections={len(sections)}, bytes={len(pdf_bytes)}")
    return pdf_bytes
