"""Example of resolving placeholders programmatically.

Uses only the env and base64 providers so it runs without AWS access.
"""

import os

from secfetch.core.secrets import (
    Base64Provider,
    EnvSecretsProvider,
    ResolutionPipeline,
)


def main() -> None:
    """Resolve a few template lines and print the result."""
    os.environ.setdefault("DEMO_CREDS", '{"user": "admin", "password": "hunter2"}')

    pipeline = ResolutionPipeline([EnvSecretsProvider(), Base64Provider()])

    template = [
        "user=env://DEMO_CREDS//user",
        "password_b64=env://DEMO_CREDS//password//base64",
        "greeting=base64://aGVsbG8gd29ybGQ=",
        "missing=env://DEMO_NOT_SET",
    ]

    for line in template:
        result = pipeline.resolve_line(line)
        print(result.text)
        for failure in result.failures:
            print(f"  ! {failure.error}")

    print(f"\nCached bodies: {len(pipeline.cache)}")


if __name__ == "__main__":
    main()
