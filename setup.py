from setuptools import setup, find_namespace_packages

setup(
    name="lambda-deployer",
    version="0.1.0",
    packages=find_namespace_packages(include=["src", "src.*"], exclude=["src.tests", "src.tests.*"]),
    py_modules=["cli"],
    install_requires=[
        "boto3",
        "botocore",
    ],
    extras_require={
        "test": [
            "pytest",
            "moto[s3]>=5",
        ],
    },
    entry_points={
        'console_scripts': [
            'lambda-deployer=cli:main',
        ],
    },
    description="CodePipeline action that deploys and promotes AWS Lambda functions",
    python_requires='>=3.8',
)
