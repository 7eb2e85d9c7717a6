[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "iwmark"
version = "0.1.0"
description = "Invisible image watermarking: LSB, pixel value differencing, additive and mid-band DFT-DCT embedding and extraction"
requires-python = ">=3.10"
keywords = ["watermark", "steganography", "image", "dct", "fft", "lsb", "pvd"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
iwm-creator = "iwmark.creator:main"
iwm-checker = "iwmark.checker:main"

[tool.hatch.build.targets.wheel]
packages = ["iwmark"]

[tool.pytest.ini_options]
addopts = "-ra"
