from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.sql import func
from typing import Mapping

db = SQLAlchemy()

TITLE_MAX_LENGTH : int = 100


class Post(db.Model):
    __tablename__ = 'posts'
    __table_args__ = {'sqlite_autoincrement': True}

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f'<Post {self.id} {self.title!r}>'


def validate_post_form(form:Mapping[str, str]) -> dict[str, str]:
    '''Return field -> message for every structural problem in a submitted post.'''
    errors : dict[str, str] = {}
    title : str = form.get('title') or ''
    content : str = form.get('content') or ''
    if not title:
        errors['title'] = 'Title is required.'
    elif len(title) > TITLE_MAX_LENGTH:
        errors['title'] = f'Title must be at most {TITLE_MAX_LENGTH} characters.'
    if not content:
        errors['content'] = 'Content is required.'
    return errors
