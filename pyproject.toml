[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yuvkit"
version = "0.1.0"
description = "Raw YUV/RGB video handling: pixel formats, raw file sources, MSE/PSNR measures, distortion colour maps and playback scheduling"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["yuv", "video", "raw video", "psnr", "mse", "pixel format", "video quality"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Video",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["yuvkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
