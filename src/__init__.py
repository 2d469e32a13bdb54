"""Resume Relay: job-tailored resume generation over chat."""

__version__ = "0.1.0"
