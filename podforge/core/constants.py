"""Constants used throughout podforge."""

VERSION = "0.1.0"

# Project layout
PODS_DIR_NAME = "pods"
TARGETS_DIR_NAME = "targets"
CONFIG_DIR_NAME = "config"
SRC_DIR_NAME = "src"
DATA_DIR_NAME = ".podforge"
OUTPUT_PODS_DIR_NAME = "pods"
EXPORT_TASKS_DIR_NAME = "tasks"

POD_FILE_SUFFIX = ".yml"
POD_METADATA_SUFFIX = ".metadata.yml"
COMMON_ENV_FILE_NAME = "common.env"

# Files under config/
PROJECT_CONFIG_FILE_NAME = "project.yml"
SOURCES_CONFIG_FILE_NAME = "sources.yml"
LIBRARIES_CONFIG_FILE_NAME = "libraries.yml"
SECRETS_CONFIG_FILE_NAME = "secrets.yml"
VAULT_CONFIG_FILE_NAME = "vault.yml"

# Persisted mount flags, under DATA_DIR_NAME
MOUNT_STATE_FILE_NAME = "sources.json"

DEFAULT_TARGET = "development"
TEST_TARGET = "test"

# Labels we stamp onto generated services
TARGET_LABEL = "io.podforge.target"
POD_LABEL = "io.podforge.pod"
SRCDIR_LABEL = "io.podforge.srcdir"
LIB_LABEL_PREFIX = "io.podforge.lib."
DEFAULT_SRCDIR = "/app"

# Labels stamped by the compose engine
COMPOSE_PROJECT_LABEL = "com.docker.compose.project"
COMPOSE_SERVICE_LABEL = "com.docker.compose.service"
COMPOSE_ONEOFF_LABEL = "com.docker.compose.oneoff"

# Host DNS plugin
HOST_ALIAS = "host.docker.internal"
DOCKER_BRIDGE_INTERFACE = "docker0"

# Readiness polling
READINESS_POLL_INTERVAL = 0.5  # seconds
