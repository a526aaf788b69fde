from setuptools import setup, find_namespace_packages

setup(
    name="quadspline",
    version="0.1.0",
    description="Spline to quadratic Bezier approximation for 2D draw stacks",
    packages=find_namespace_packages(include=["maths", "maths.*", "utils"]),
    py_modules=["main"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "colorlog",
        "opencv-python",
        "Pillow",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
