import secrets
from flask import Flask, render_template, redirect, request, url_for, flash, Response
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from models import db, Post, validate_post_form
from typing import Union, Optional, Any, Mapping
from dotenv import load_dotenv
import config

SECURITY_HEADERS : dict[str, str] = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'SAMEORIGIN',
    'Referrer-Policy': 'no-referrer',
    'Content-Security-Policy': "default-src 'self'; object-src 'none'; frame-ancestors 'self'",
}


def create_app(test_config:Optional[Mapping[str, Any]]=None) -> Flask:
    load_dotenv()
    app : Flask = Flask(__name__, static_folder='public', static_url_path='/public')
    app.config['SECRET_KEY'] = config.secret_key() or secrets.token_hex(16)
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if test_config:
        app.config.update(test_config)
    if 'SQLALCHEMY_DATABASE_URI' not in app.config:
        app.config['SQLALCHEMY_DATABASE_URI'] = config.database_uri(config.db_file(), app.instance_path)

    app.logger.setLevel(config.log_level_name())
    db.init_app(app)

    with app.app_context():
        db.create_all()
    app.logger.info('posts table ready at %s', app.config['SQLALCHEMY_DATABASE_URI'])

    register_hooks(app)
    register_error_handlers(app)
    register_routes(app)
    register_commands(app)
    return app


def register_hooks(app:Flask) -> None:
    @app.before_request
    def log_request() -> None:
        app.logger.info(
            'Incoming request %s %s host=%s remote=%s:%s',
            request.method,
            request.full_path if request.query_string else request.path,
            request.host,
            request.remote_addr,
            request.environ.get('REMOTE_PORT', '-'),
        )
        app.logger.debug('Request headers: %s', dict(request.headers))

    @app.after_request
    def set_security_headers(response:Response) -> Response:
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def register_error_handlers(app:Flask) -> None:
    @app.errorhandler(404)
    def not_found(error:HTTPException) -> tuple[str, int]:
        return render_template('404.html', message=error.description), 404

    @app.errorhandler(Exception)
    def internal_error(error:Exception) -> Union[tuple[str, int], HTTPException]:
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        app.logger.exception('Request error on %s %s', request.method, request.path)
        return render_template('500.html'), 500


def register_routes(app:Flask) -> None:
    @app.route('/')
    def index() -> Union[str, Any]:
        posts : list[Post] = Post.query.order_by(Post.created_at.desc(), Post.id.desc()).all()
        return render_template('index.html', posts=posts)

    @app.route('/post/new')
    def new_post() -> Union[str, Any]:
        return render_template('new.html', errors={}, form={})

    @app.route('/post', methods=['POST'])
    def create_post() -> Union[str, Any]:
        errors : dict[str, str] = validate_post_form(request.form)
        if errors:
            app.logger.info('Rejected post: %s', ', '.join(sorted(errors)))
            return render_template('new.html', errors=errors, form=request.form), 400
        new_post : Post = Post(title=request.form['title'], content=request.form['content'])
        db.session.add(new_post)
        db.session.commit()
        app.logger.info('Created post %s', new_post.id)
        flash('Post created.')
        return redirect(url_for('index'))

    @app.route('/post/<int:post_id>')
    def view_post(post_id:int) -> Union[str, Any]:
        post : Post = Post.query.filter_by(id=post_id).first_or_404(description='Post not found.')
        return render_template('post.html', post=post)

    @app.route('/post/<int:post_id>/delete', methods=['POST'])
    def delete_post(post_id:int) -> Union[str, Any]:
        deleted : int = Post.query.filter_by(id=post_id).delete()
        db.session.commit()
        app.logger.info('Deleted post %s (%d row(s))', post_id, deleted)
        if deleted:
            flash('Post deleted.')
        return redirect(url_for('index'))


def register_commands(app:Flask) -> None:
    @app.cli.command('init-db')
    def init_db() -> None:
        '''Create the posts table if it does not exist.'''
        try:
            db.create_all()
        except SQLAlchemyError as exc:
            app.logger.error('Error setting up the database: %s', exc)
            raise
        print('Database and posts table created successfully')


if __name__ == '__main__':
    app : Flask = create_app()
    port : int = config.port()
    host : str = config.host()
    app.logger.info('Server listening at %s:%d', host, port)
    app.run(host=host, port=port)
