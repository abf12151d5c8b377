"""Default configuration values."""

# Files maint reads and writes in the working directory
DEFAULT_CONFIG_PATH = ".agent-config.json"
DEFAULT_USAGE_PATH = ".agent-usage.json"

# Environment variables
CONFIG_PATH_ENV = "MAINT_CONFIG"
MONTHLY_BUDGET_ENV = "MAINT_MONTHLY_BUDGET"

# Agents known to the configuration and template registries
CODE_REVIEWER = "codeReviewer"
BUG_FIXER = "bugFixer"
DOCUMENTATION_WRITER = "documentationWriter"
AGENT_NAMES = (CODE_REVIEWER, BUG_FIXER, DOCUMENTATION_WRITER)

# Global generation defaults
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 2000
DEFAULT_GENERATION_TIMEOUT = 120.0

DEFAULT_REVIEWER_EXCLUDES = ["*.test.js", "*.spec.js", "node_modules/**"]
DEFAULT_FIXER_EXCLUDES = ["**/migrations/**", "**/seeds/**", "**/fixtures/**"]

# Bug fixer loop
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TEST_COMMAND = "npm test"
DEFAULT_TEST_TIMEOUT = 300.0

# Cost controls
DEFAULT_MONTHLY_BUDGET = 50.0
DEFAULT_ALERT_THRESHOLD = 0.90
MIN_TEAM_BUDGET = 25
BUDGET_PER_DEVELOPER = 10
