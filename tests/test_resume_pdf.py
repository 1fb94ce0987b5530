"""
Tests for the resume document renderer.
"""
import pytest

from careerpath.db.models.user import User
from careerpath.db.models.profile import Profile, Experience, Certification
from careerpath.services.resume_pdf import (
    ResumeData,
    ExperienceData,
    CertificationData,
    split_bullets,
    build_sections,
    contact_line,
    display_name,
    parse_start_date,
    load_resume_data,
    render_resume_pdf,
)


def full_resume() -> ResumeData:
    return ResumeData(
        full_name="Jane Doe",
        email="jane@example.com",
        phone="555-0100",
        location="Austin, TX",
        linkedin_link="linkedin.com/in/janedoe",
        headline="Aspiring Nurse",
        about_text="Caring student with hospital volunteer experience.",
        high_school="Westlake High School",
        graduation_year="2025",
        skills=["CPR", " First Aid ", ""],
        experiences=[
            ExperienceData(type="volunteer", title="Volunteer", organization="St. David's", start_date="2023-06",
                           description="• Greeted patients\n\n- Restocked supplies\n* Filed charts"),
            ExperienceData(type="job", title="Cashier", organization="H-E-B", start_date="2024-01", end_date="2024-08"),
            ExperienceData(type="club", title="President", organization="HOSA"),
        ],
        certifications=[CertificationData(name="BLS", issuer="American Heart Association", date_issued="2024-03")],
    )


def test_split_bullets_strips_markers_and_blank_lines():
    text = "• Led team\n\n  - Built app\n*   Shipped\n   \nPlain line"
    assert split_bullets(text) == ["Led team", "Built app", "Shipped", "Plain line"]


def test_split_bullets_empty():
    assert split_bullets(None) == []
    assert split_bullets("") == []


def test_build_sections_order():
    titles = [title for title, _ in build_sections(full_resume())]
    assert titles == ["Professional Summary", "Experience", "Education", "Certifications", "Skills"]


def test_build_sections_omits_empty_sections():
    data = ResumeData(full_name="Jane Doe", skills=["Excel"])
    assert [title for title, _ in build_sections(data)] == ["Skills"]


def test_experience_sorted_newest_first_undated_last():
    sections = dict(build_sections(full_resume()))
    entries = sections["Experience"]

    assert [e.heading for e in entries] == ["Cashier", "Volunteer", "President"]
    assert entries[0].meta == "2024-01 - 2024-08"
    assert entries[1].meta == "2023-06 - Present"
    assert entries[2].meta is None
    assert entries[1].subheading == "St. David's • Volunteer"
    assert entries[1].bullets == ["Greeted patients", "Restocked supplies", "Filed charts"]


def test_experience_free_text_dates_sorted_chronologically():
    data = ResumeData(experiences=[
        ExperienceData(title="Tutor", organization="Library", start_date="Sep 2021"),
        ExperienceData(title="Barista", organization="Cafe", start_date="Jan 2023"),
        ExperienceData(title="Intern", organization="Lab", start_date="2022-06"),
        ExperienceData(title="Helper", organization="Church", start_date="summers"),
        ExperienceData(title="Member", organization="Club"),
    ])

    entries = dict(build_sections(data))["Experience"]

    assert [e.heading for e in entries] == ["Barista", "Intern", "Tutor", "Helper", "Member"]


def test_parse_start_date_formats():
    assert parse_start_date("2024-01").isoformat() == "2024-01-01"
    assert parse_start_date("September 2021").isoformat() == "2021-09-01"
    assert parse_start_date("03/2020").isoformat() == "2020-03-01"
    assert parse_start_date("2019").isoformat() == "2019-01-01"
    assert parse_start_date("someday") is None
    assert parse_start_date(None) is None


def test_education_and_skills_entries():
    sections = dict(build_sections(full_resume()))

    assert sections["Education"][0].heading == "Westlake High School"
    assert sections["Education"][0].meta == "Graduated: 2025"
    assert sections["Skills"][0].bullets == ["CPR", "First Aid"]
    assert sections["Skills"][0].text is None


def test_display_name_placeholder():
    assert display_name(ResumeData()) == "Your Name"
    assert display_name(full_resume()) == "Jane Doe"


def test_contact_line_skips_missing_parts():
    data = ResumeData(email="jane@example.com", linkedin_link="linkedin.com/in/jane")
    assert contact_line(data) == "jane@example.com | linkedin.com/in/jane"
    assert contact_line(full_resume()) == "Austin, TX | jane@example.com | 555-0100 | linkedin.com/in/janedoe"


def test_render_resume_pdf_returns_pdf():
    pdf = render_resume_pdf(full_resume())
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_render_resume_pdf_minimal_data():
    assert render_resume_pdf(ResumeData()).startswith(b"%PDF")


def test_render_resume_pdf_escapes_markup():
    data = ResumeData(full_name="A <b>& B", about_text="Uses <script> & ampersands")
    assert render_resume_pdf(data).startswith(b"%PDF")


def test_render_resume_pdf_paginates_long_content():
    data = ResumeData(
        full_name="Long Resume",
        experiences=[
            ExperienceData(title=f"Role {i}", organization="Org", start_date=f"20{i:02d}-01",
                           description="\n".join(f"- Achievement {j}" for j in range(8)))
            for i in range(30)
        ],
    )
    assert render_resume_pdf(data).startswith(b"%PDF")


def test_load_resume_data_reads_builder_tables(db_session):
    db_session.add(User(id="u1", email="jane@example.com", full_name="Jane Doe"))
    db_session.add(Profile(user_id="u1", headline="Aspiring Nurse", skills=["CPR"], high_school="Westlake"))
    db_session.add(Experience(user_id="u1", title="Volunteer", organization="Clinic", description="- Helped"))
    db_session.add(Certification(user_id="u1", name="BLS"))
    db_session.commit()

    data = load_resume_data(db_session, "u1")

    assert data.full_name == "Jane Doe"
    assert data.headline == "Aspiring Nurse"
    assert data.skills == ["CPR"]
    assert data.experiences[0].organization == "Clinic"
    assert data.certifications[0].name == "BLS"


def test_load_resume_data_without_profile(db_session):
    db_session.add(User(id="u1", full_name="Jane Doe"))
    db_session.commit()

    data = load_resume_data(db_session, "u1")
    assert data.headline is None
    assert data.skills == []


def test_load_resume_data_missing_user(db_session):
    with pytest.raises(LookupError):
        load_resume_data(db_session, "nobody")
