[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "jpegppm"
version = "0.1.0"
description = "Baseline JPEG decoder that writes binary PGM and PPM images"
requires-python = ">=3.10"
dependencies = []
keywords = ["jpeg", "ppm", "pgm", "decoder", "huffman", "idct"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
jpeg2ppm = "jpegppm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["jpegppm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
