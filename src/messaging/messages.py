"""Chat copy sent to users.

Replies never include exception text or other internal detail.
"""

from __future__ import annotations

PRODUCT_NAME = "Resume Relay"


def _greeting(name: str | None) -> str:
    return f"Hi {name or 'there'}!"


def welcome(name: str | None = None) -> str:
    return (
        f"*{PRODUCT_NAME} Resume Builder*\n\n"
        f"{_greeting(name)} I'll help you create a resume tailored to your target job.\n\n"
        "*Step 1 of 2:* Please share your email address.\n"
        "Example: john.doe@email.com\n\n"
        "This email should match your profile.\n\n"
        'Type "cancel" to stop anytime.'
    )


def invalid_email(attempt: int, max_attempts: int) -> str:
    return (
        "*Invalid email format*\n\n"
        "Please provide a valid email address.\n"
        "Example: john.doe@gmail.com\n\n"
        f"Attempt {attempt}/{max_attempts}\n\n"
        'Type "cancel" to stop.'
    )


def email_accepted(email: str, profile_found: bool) -> str:
    found = (
        "Profile found!"
        if profile_found
        else "No profile found for this email yet. Make sure it matches your registration."
    )
    return (
        f"*Email confirmed:* {email}\n\n"
        f"{found}\n\n"
        "*Step 2 of 2:* Please paste the complete job description, including the job "
        "title, requirements, responsibilities and qualifications.\n\n"
        "The more detail you provide, the better the resume will match.\n\n"
        'Type "cancel" to stop.'
    )


def job_description_too_short(attempt: int, max_attempts: int, min_length: int) -> str:
    return (
        "*Job description too short*\n\n"
        f"Please provide a more detailed job description (at least {min_length} characters) "
        "with the job title, key requirements and required skills.\n\n"
        f"Attempt {attempt}/{max_attempts}\n\n"
        'Type "cancel" to stop.'
    )


def too_many_attempts() -> str:
    return (
        "*Too many invalid attempts*\n\n"
        'Let\'s start fresh. Type "resume" when you\'re ready to try again.\n\n'
        'Need help? Type "help".'
    )


def processing_started(email: str, job_description_length: int) -> str:
    return (
        "*Resume generation started*\n\n"
        f"Email: {email}\n"
        f"Job description: received ({job_description_length} characters)\n\n"
        "Analyzing the job, matching your skills and generating your PDF. "
        "This usually takes under a minute."
    )


def still_working() -> str:
    return "Still working on your resume. I'll send it as soon as it's ready."


def resume_ready(file_name: str, size_bytes: int, url: str) -> str:
    size_kb = max(round(size_bytes / 1024), 1)
    return (
        "*Your tailored resume is ready!*\n\n"
        f"File: {file_name}\n"
        f"Size: {size_kb}KB\n\n"
        "Customized for this job:\n"
        "- Skills ordered by job relevance\n"
        "- Professional summary\n"
        "- Keywords for applicant tracking systems\n\n"
        f"Download: {url}\n\n"
        'Need another resume? Type "resume".'
    )


def document_caption(file_name: str) -> str:
    return f"Your tailored resume: {file_name}"


def profile_not_found(email: str) -> str:
    return (
        "*Profile not found*\n\n"
        f"I couldn't find a profile for {email}.\n\n"
        "Please register and complete your profile (skills, experience and education), "
        'then type "resume" to try again.'
    )


def generation_failed() -> str:
    return (
        "*Resume generation failed*\n\n"
        "Sorry, something went wrong while creating your resume. "
        'Please try again in a few minutes by typing "resume".\n\n'
        'Need help? Type "help".'
    )


def cancelled() -> str:
    return (
        "*Process cancelled*\n\n"
        'No worries! You can start again anytime by typing "resume".\n\n'
        'Need help? Type "help".'
    )


def help_text(min_length: int) -> str:
    return (
        f"*{PRODUCT_NAME} help*\n\n"
        "Commands:\n"
        '- "resume" or "start": begin resume creation\n'
        '- "help": show this message\n'
        '- "cancel" or "stop": cancel the current process\n\n'
        "How it works:\n"
        "1. Type \"resume\" to start\n"
        "2. Provide your email address\n"
        f"3. Paste the complete job description ({min_length}+ characters)\n"
        "4. Receive your tailored resume as a PDF"
    )


def unregistered_user_alert(phone: str, email: str | None, name: str | None) -> str:
    return (
        "Unregistered user requested a resume\n"
        f"Phone: {phone}\n"
        f"Email: {email or 'unknown'}\n"
        f"Name: {name or 'unknown'}"
    )
