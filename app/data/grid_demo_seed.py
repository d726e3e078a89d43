DEMO_USERS = [
    {"email": "kody@example.com", "username": "kody", "name": "Kody Koala"},
    {"email": "ada@example.com", "username": "ada", "name": "Ada Lovelace"},
    {"email": "grace@example.com", "username": "grace", "name": "Grace Hopper"},
]

DEMO_NOTES = [
    {"owner": "kody", "title": "Basic Koala Facts", "content": "Koalas are found in the eucalyptus forests of eastern Australia."},
    {"owner": "kody", "title": "Koalas like to cuddle", "content": "Cuddle all the koalas."},
    {"owner": "ada", "title": "Analytical engine", "content": "Notes on the analytical engine, with an algorithm for Bernoulli numbers."},
    {"owner": "grace", "title": "First bug", "content": "Moth found in relay #70, panel F."},
]
