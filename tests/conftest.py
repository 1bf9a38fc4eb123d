"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
import tempfile
import shutil


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test artifacts."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """A config exercising every cascade level, in file (camelCase) form."""
    return {
        "defaultChannelNames": ["stdout"],
        "defaultWorkers": 2,
        "minResyncPeriod": "1h",
        "channels": {
            "stdout": {"type": "print", "print": {"writer": "stdout"}},
            "hook": {"type": "callback", "callback": {"url": "https://example.com/hook"}},
            "bot": {
                "type": "telegram",
                "telegram": {"token": "123:ABC", "chats": ["1", "2"]},
            },
            "everyone": {"type": "group", "group": ["stdout", "hook"]},
        },
        "namespaces": [
            {
                "namespace": "default",
                "defaultChannelNames": ["hook"],
                "defaultMaxRetries": 5,
                "minResyncPeriod": "30m",
                "resources": [
                    {
                        "resource": "deployments.v1.apps",
                        "noticeWhenAdded": True,
                        "noticeWhenDeleted": True,
                        "noticeWhenUpdated": True,
                        "updateOn": ["spec.replicas"],
                    },
                    {
                        "resource": "configmaps",
                        "noticeWhenUpdated": True,
                        "channelNames": ["bot", "everyone"],
                        "workers": 7,
                        "maxRetries": 1,
                        "resyncPeriod": "10m",
                    },
                ],
            },
            {
                "namespace": "",
                "resources": [
                    {"resource": "namespaces", "noticeWhenAdded": True},
                ],
            },
        ],
    }


def make_deployment(replicas=1, ready=1, namespace="default", name="web"):
    """Unstructured Deployment object."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"namespace": namespace, "name": name},
        "spec": {"replicas": replicas},
        "status": {"readyReplicas": ready},
    }
