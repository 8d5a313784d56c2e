from setuptools import setup, find_packages
import os

install_requires = ["lark", "pydantic>=2"]

# Define optional dependencies for development and specific features
extras_require = {
    "dev": ["pytest", "pygls>=1.0.0,<2", "lsprotocol"],
    "test": ["pytest", "pygls>=1.0.0,<2", "lsprotocol"],
    "lsp": ["pygls>=1.0.0,<2", "lsprotocol"],  # Language Server Protocol support
}

setup(
    name="plotscript",
    version="1.0.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "plotscript = plotscript.cli:main",
            "plotscript-lsp = plotscript.server:start_server",
        ],
    },
    include_package_data=True,
    package_data={"plotscript.lexer": ["*.lark"]},
    description="A suspendable scripting engine for RPG event and cutscene scripts.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
