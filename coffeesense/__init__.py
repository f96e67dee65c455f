"""
CoffeeSense - project configuration for the CoffeeScript language server

Resolves which projects a workspace contains and which package.json and
tsconfig.json/jsconfig.json govern each of them.
"""

__version__ = "0.1.0"
