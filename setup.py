import re
import setuptools

SECTION_RE = re.compile(r'^\[(.*?)\]$')
FIELD_RE = re.compile(r'^(.*?) = \[?"(.*?)"\]?$')
pyproject = {}
section = None
with open('pyproject.toml') as fin:
    for line in fin:
        line = line.rstrip('\n')
        m = SECTION_RE.match(line)
        if m is not None:
            section = m.group(1)
            pyproject[section] = {}
        else:
            m = FIELD_RE.match(line)
            if m is not None:
                key, value = m.groups()
                pyproject[section][key] = value

VERSION_RE = re.compile(r'^\^(.*)$')

def get_requirements(section):
    result = []
    for package_name, version_str in sorted(pyproject[section].items(), key=lambda x: x[0]):
        version = VERSION_RE.match(version_str).group(1)
        result.append((package_name, version))
    return result

dependencies = []
for package_name, version in get_requirements('tool.poetry.dependencies'):
    if package_name == 'python':
        python_version = version
    else:
        dependencies.append((package_name, version))
test_dependencies = get_requirements('tool.poetry.dev-dependencies')

info = pyproject['tool.poetry']
with open('README.md') as fin:
    long_description = fin.read()

setuptools.setup(
    name=info['name'],
    version=info['version'],
    author=info['authors'],
    description=info['description'],
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=setuptools.find_packages(include=['torch_weld_einsum']),
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Topic :: Software Development :: Compilers',
    ],
    python_requires='>=' + python_version,
    install_requires=[name + '>=' + version for name, version in dependencies],
    extras_require={
        'test' : [name + '>=' + version for name, version in test_dependencies]
    }
)
