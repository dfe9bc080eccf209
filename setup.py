from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


def read_requirements() -> list[str]:
    req = Path(__file__).parent / "requirements.txt"
    if not req.exists():
        return []
    lines: list[str] = []
    for line in req.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        lines.append(line)
    return lines


setup(
    name="git-worklog",
    version="0.1.0",
    description="Scan local git repositories and summarize daily work by commit category",
    long_description=(Path(__file__).parent / "README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    packages=find_packages(include=["git_worklog", "git_worklog.*"]),
    include_package_data=True,
    install_requires=read_requirements(),
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "git-worklog=git_worklog.cli:main",
            "git-worklog-serve=git_worklog.service.run:main",
        ]
    },
)
