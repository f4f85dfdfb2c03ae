# ABOUTME: Shared test configuration for the weather widget test suite.
# ABOUTME: Keeps the proxy module from picking up a real API key from the environment.

import os

# Importing weather_widget.web builds the module-level app from the environment
os.environ.pop("OPENWEATHER_API_KEY", None)
os.environ.pop("VITE_OPENWEATHER_API_KEY", None)
