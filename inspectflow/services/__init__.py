"""Client-side services: approval rules, auth state and the backend API client."""
