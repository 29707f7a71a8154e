"""Install the conference planner front end."""

from setuptools import setup, find_packages

setup(
    name='conference-planner-frontend',
    version='0.1.0',
    packages=find_packages(exclude=['*test*']),
    py_modules=['wsgi'],
    package_data={'planner': ['templates/planner/*.html']},
    install_requires=[
        "flask>=2.2",
        "werkzeug",
        "wtforms>=3",
        "flask-wtf",
        "authlib>=1.0",
        "requests",
        "pyjwt",
        "python-dateutil",
        "pytz",
        "retry",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=False
)
