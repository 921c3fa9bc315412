"""Test fixtures for cmdletgen tests.

This module provides sample OpenAPI documents and configuration values for
testing schema decoding, type resolution and project assembly.
"""

# Configuration values every successful run needs
CONTOSO_VALUES = {
    'module-name': 'Contoso',
    'module-version': '1.0.0',
    'dll-name': 'Contoso.private',
    'help-link-prefix': 'https://docs.contoso.com/powershell/',
}

# One object schema and one list operation
WIDGET_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Widget Service', 'version': '2024-01-01'},
    'paths': {
        '/widgets': {
            'get': {
                'operationId': 'listWidgets',
                'responses': {
                    '200': {
                        'description': 'All widgets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Widget'},
                                }
                            }
                        },
                    }
                },
            }
        }
    },
    'components': {
        'schemas': {
            'Widget': {
                'type': 'object',
                'required': ['name'],
                'properties': {
                    'name': {'type': 'string'},
                    'count': {'type': 'integer'},
                },
            }
        }
    },
}

# Enums, maps, booleans, parameters of every location and inline types
CONTOSO_SPEC = {
    'openapi': '3.0.1',
    'info': {
        'title': 'Contoso Widgets',
        'version': '2024-01-01',
        'description': 'Manage widgets',
        'x-ms-metadata': {'profiles': ['latest', '2020-09-01-hybrid']},
    },
    'paths': {
        '/widgets': {
            'get': {
                'operationId': 'listWidgets',
                'parameters': [
                    {'$ref': '#/components/parameters/ApiVersion'},
                    {
                        'name': 'top',
                        'in': 'query',
                        'schema': {'type': 'integer', 'format': 'int32'},
                    },
                    {
                        'name': 'color',
                        'in': 'query',
                        'schema': {'type': 'string', 'enum': ['red', 'green']},
                    },
                    {
                        'name': 'verbose',
                        'in': 'query',
                        'schema': {'type': 'boolean'},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'All widgets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Widget'},
                                }
                            }
                        },
                    }
                },
            },
            'post': {
                'operationId': 'createWidget',
                'parameters': [{'$ref': '#/components/parameters/ApiVersion'}],
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/Widget'}
                        }
                    },
                },
                'responses': {
                    '201': {
                        'description': 'Created',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Widget'}
                            }
                        },
                    }
                },
            },
        },
        '/widgets/{widgetName}': {
            'parameters': [
                {'name': 'widgetName', 'in': 'path', 'schema': {'type': 'string'}}
            ],
            'get': {
                'operationId': 'getWidget',
                'parameters': [{'$ref': '#/components/parameters/ApiVersion'}],
                'responses': {
                    '200': {
                        'description': 'The widget',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Widget'}
                            }
                        },
                    }
                },
            },
            'delete': {
                'parameters': [{'$ref': '#/components/parameters/ApiVersion'}],
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
        '/stats': {
            'get': {
                'operationId': 'getStats',
                'responses': {
                    '200': {
                        'description': 'Usage statistics',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'object',
                                    'properties': {
                                        'total': {'type': 'integer', 'format': 'int64'},
                                    },
                                }
                            }
                        },
                    }
                },
            }
        },
    },
    'components': {
        'parameters': {
            'ApiVersion': {
                'name': 'api-version',
                'in': 'query',
                'required': True,
                'schema': {'type': 'string'},
            }
        },
        'schemas': {
            'Widget': {
                'type': 'object',
                'description': 'A widget',
                'required': ['name'],
                'properties': {
                    'name': {'type': 'string'},
                    'count': {'type': 'integer', 'default': 1},
                    'enabled': {'type': 'boolean'},
                    'size': {'$ref': '#/components/schemas/Size'},
                    'createdAt': {'type': 'string', 'format': 'date-time'},
                    'labels': {
                        'type': 'object',
                        'additionalProperties': {'type': 'string'},
                    },
                    'parts': {
                        'type': 'array',
                        'items': {'$ref': '#/components/schemas/Part'},
                    },
                },
            },
            'Size': {'type': 'string', 'enum': ['small', 'medium', 'large']},
            'Part': {
                'type': 'object',
                'properties': {
                    'sku': {'type': 'string'},
                    'widget': {'$ref': '#/components/schemas/Widget'},
                },
            },
            'Name': {'type': 'string'},
        },
    },
}

# Discriminated hierarchy: Pet with Cat and Dog children
PETS_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Pets', 'version': '1.0.0'},
    'paths': {},
    'components': {
        'schemas': {
            'Pet': {
                'type': 'object',
                'required': ['petType'],
                'properties': {
                    'petType': {'type': 'string'},
                    'name': {'type': 'string'},
                },
                'discriminator': {
                    'propertyName': 'petType',
                    'mapping': {
                        'cat': '#/components/schemas/Cat',
                        'dog': '#/components/schemas/Dog',
                    },
                },
            },
            'Cat': {
                'allOf': [
                    {'$ref': '#/components/schemas/Pet'},
                    {
                        'type': 'object',
                        'required': ['lives'],
                        'properties': {'lives': {'type': 'integer'}},
                    },
                ]
            },
            'Dog': {
                'allOf': [
                    {'$ref': '#/components/schemas/Pet'},
                    {'type': 'object', 'properties': {'breed': {'type': 'string'}}},
                ]
            },
        }
    },
}

# Self-referencing tree
NODE_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Tree', 'version': '1.0.0'},
    'paths': {},
    'components': {
        'schemas': {
            'Node': {
                'type': 'object',
                'properties': {
                    'name': {'type': 'string'},
                    'children': {
                        'type': 'array',
                        'items': {'$ref': '#/components/schemas/Node'},
                    },
                    'parent': {'$ref': '#/components/schemas/Node'},
                },
            }
        }
    },
}

# A schema the resolver cannot map, used by an operation
UNSUPPORTED_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Uploads', 'version': '1.0.0'},
    'paths': {
        '/uploads': {
            'post': {
                'operationId': 'createUpload',
                'requestBody': {
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/Attachment'}
                        }
                    }
                },
                'responses': {'204': {'description': 'Uploaded'}},
            }
        }
    },
    'components': {'schemas': {'Attachment': {'type': 'file'}}},
}
