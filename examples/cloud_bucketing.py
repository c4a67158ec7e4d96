import logging
import os

from DevCycleClient import (
    DevCycleCloudClient,
    DevCycleOptions,
    EvalHook,
    Event,
    User,
)

SDK_KEY = os.environ.get("DEVCYCLE_SERVER_SDK_KEY", "dvc_server_example")
VARIABLE_KEY = "new-checkout"

logging.basicConfig(level=logging.INFO)


def log_evaluation(context, variable):
    print(
        f"{context.key} for {context.user.user_id}: {variable.value} "
        f"(defaulted: {variable.is_defaulted})"
    )


options = DevCycleOptions(
    enable_edge_db=False,
    eval_hooks=[EvalHook(on_finally=log_evaluation)],
)

user = User(user_id="example-user", country="CA", custom_data={"plan": "pro"})

with DevCycleCloudClient(SDK_KEY, options) as client:
    enabled = client.variable_value(user, VARIABLE_KEY, False)
    print(f"{VARIABLE_KEY} enabled? {enabled}")

    for key, variable in client.all_variables(user).items():
        print(f"{key} = {variable.value!r}")

    for key, feature in client.all_features(user).items():
        print(f"{key}: variation {feature.variation_name}")

    client.track(user, Event(type="customEvent", target="checkout", value=1))
