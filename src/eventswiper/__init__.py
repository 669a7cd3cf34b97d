"""Event Swiper - triage conference events and export them as a calendar."""
