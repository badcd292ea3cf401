"""
Flashcard practice core.

Spaced-repetition scheduling, review-state persistence and the live
practice-session queue. UI layers (see practice_app) only talk to this
package through practice.actions and practice.session.
"""
