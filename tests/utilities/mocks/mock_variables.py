MOCK_BOOLEAN_VARIABLE = {
    "_id": "614ef6ea475129459160721a",
    "key": "test-variable",
    "type": "Boolean",
    "value": True,
    "eval": {"reason": "TARGETING_MATCH", "details": "All Users"},
}

MOCK_NUMBER_VARIABLE = {
    "_id": "614ef6ea475129459160721b",
    "key": "test-number",
    "type": "Number",
    "value": 42,
}

MOCK_STRING_VARIABLE = {
    "_id": "614ef6ea475129459160721c",
    "key": "test-string",
    "type": "String",
    "value": "variation-on",
}

MOCK_JSON_VARIABLE = {
    "_id": "614ef6ea475129459160721d",
    "key": "test-json",
    "type": "JSON",
    "value": {"enabled": True, "limit": 5},
}

MOCK_ALL_VARIABLES = {
    "test-variable": MOCK_BOOLEAN_VARIABLE,
    "test-number": MOCK_NUMBER_VARIABLE,
    "test-string": MOCK_STRING_VARIABLE,
    "test-json": MOCK_JSON_VARIABLE,
}

MOCK_ALL_FEATURES = {
    "test-feature": {
        "_id": "614ef6aa473928459060721a",
        "key": "test-feature",
        "type": "release",
        "_variation": "615357cf7e9ebdca58446ed0",
        "variationKey": "variation-on",
        "variationName": "Variation On",
        "eval": {"reason": "TARGETING_MATCH", "details": "All Users"},
    }
}

MOCK_ERROR_RESPONSE = {"statusCode": 400, "message": ["user_id should not be empty"]}
