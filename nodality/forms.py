from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, TextAreaField
from wtforms.validators import DataRequired, Email, Length, EqualTo, Optional, URL

# Firebase Auth rejects shorter passwords
MIN_PASSWORD_LENGTH = 6


class RegistrationForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message='Enter your email'), Email(message='Enter a valid email address')])
    password = PasswordField('Password', validators=[DataRequired(message='Enter a password'), Length(min=MIN_PASSWORD_LENGTH, message='Use at least 6 characters')])
    confirm_password = PasswordField('Confirm password', validators=[DataRequired(message='Confirm your password'), EqualTo('password', message='Passwords do not match')])


class LoginForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message='Enter your email'), Email(message='Enter a valid email address')])
    password = PasswordField('Password', validators=[DataRequired(message='Enter your password')])


class ForgotPasswordForm(FlaskForm):
    email = StringField('Email', validators=[DataRequired(message='Enter your email'), Email(message='Enter a valid email address')])


class ThemeForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Enter a title'), Length(max=200)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=2000)])
    image_url = StringField('Image URL', validators=[Optional(), URL(message='Enter a valid URL')])


class ThemeUpdateForm(FlaskForm):
    title = StringField('Title', validators=[Optional(), Length(min=1, max=200)])
    description = TextAreaField('Description', validators=[Optional(), Length(max=2000)])
    image_url = StringField('Image URL', validators=[Optional(), URL(message='Enter a valid URL')])


class NodeForm(FlaskForm):
    title = StringField('Title', validators=[DataRequired(message='Enter a title'), Length(max=200)])
    content = TextAreaField('Content', validators=[Optional()])
    theme_id = StringField('Theme', validators=[Optional(), Length(max=128)])


class MessageForm(FlaskForm):
    message = TextAreaField('Message', validators=[DataRequired(message='Enter a message'), Length(max=1000)])


def form_errors(form):
    """Flatten WTForms errors into ``{field: first message}``."""
    return {field: messages[0] for field, messages in form.errors.items() if messages}
