import json

import pytest

from lazyproxy.property_scopes import PropertyScopeCache
from lazyproxy.reflection import ClassRegistry

CLASSES = {
    "classes": [
        {"name": "stdClass", "internal": True},
        {
            "name": "ArrayObject",
            "internal": True,
            "methods": [{"name": "count", "return_type": "int", "tentative_return_type": True}],
        },
        {"name": "App\\Collection", "parent": "ArrayObject"},
        {"name": "App\\Message"},
        {"name": "App\\Transport"},
        {
            "name": "App\\Greeter",
            "properties": [{"name": "name"}],
            "methods": [
                {
                    "name": "greet",
                    "parameters": [{"name": "who", "type": "string", "default": "'world'"}],
                    "return_type": "string",
                },
            ],
        },
        {
            "name": "App\\MailerInterface",
            "interface": True,
            "methods": [
                {"name": "send", "parameters": [{"name": "message", "type": "App\\Message"}], "return_type": "void"},
            ],
        },
        {
            "name": "App\\Resettable",
            "interface": True,
            "methods": [{"name": "reset", "return_type": "void"}],
        },
        {
            "name": "App\\Base",
            "properties": [
                {"name": "secret", "visibility": "private"},
                {"name": "shared", "visibility": "protected"},
                {"name": "label"},
            ],
            "methods": [{"name": "label", "return_type": "string"}],
        },
        {
            "name": "App\\Mailer",
            "parent": "App\\Base",
            "interfaces": ["App\\MailerInterface"],
            "properties": [
                {"name": "transport", "visibility": "private"},
                {"name": "item10"},
                {"name": "item9"},
                {"name": "id", "readonly": True},
                {"name": "instances", "static": True},
            ],
            "methods": [
                {"name": "send", "parameters": [{"name": "message", "type": "App\\Message"}], "return_type": "void"},
                {"name": "getTransport", "return_type": "?App\\Transport"},
                {
                    "name": "withTransport",
                    "parameters": [{"name": "transport", "type": "App\\Transport"}],
                    "return_type": "static",
                },
                {"name": "describe"},
                {"name": "fail", "return_type": "never"},
                {"name": "helper", "visibility": "protected", "return_type": "int"},
                {"name": "create", "static": True, "return_type": "static"},
                {"name": "id", "final": True, "return_type": "int"},
            ],
        },
        {"name": "App\\FinalMailer", "final": True},
        {"name": "App\\AbstractMailer", "abstract": True},
        {"name": "App\\ReadonlyPoint", "readonly": True, "properties": [{"name": "x", "readonly": True}]},
        {
            "name": "App\\MagicBag",
            "methods": [{"name": "__get", "parameters": [{"name": "name"}], "return_type": "string"}],
        },
        {
            "name": "App\\MixedBag",
            "methods": [{"name": "__get", "parameters": [{"name": "name"}], "return_type": "mixed"}],
        },
        {"name": "App\\Unclonable", "methods": [{"name": "__clone", "final": True, "return_type": "void"}]},
        {
            "name": "App\\Sealed",
            "methods": [{"name": "bar", "final": True, "return_type": "string"}],
        },
        {
            "name": "App\\BarInterface",
            "interface": True,
            "methods": [{"name": "bar", "return_type": "string"}],
        },
    ]
}


@pytest.fixture
def registry():
    return ClassRegistry.from_dict(CLASSES)


@pytest.fixture
def cache():
    return PropertyScopeCache()


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "classes.json"
    path.write_text(json.dumps(CLASSES))
    return path
