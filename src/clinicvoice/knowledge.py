"""Clinic facts and the system prompt built from them.

The knowledge base is an immutable value built once at startup and passed to
whatever needs it; tests can construct an alternate clinic freely.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServiceCategory:
    category: str
    items: tuple[str, ...]


@dataclass(frozen=True)
class Contact:
    address: str
    phone: str
    fax: str = ""
    email: str = ""
    website: str = ""


@dataclass(frozen=True)
class AppointmentPolicy:
    booking_method: str
    accepts_new_patients: bool
    insurance: tuple[str, ...]
    walk_ins: str
    after_hours: str


@dataclass(frozen=True)
class ClinicKnowledgeBase:
    clinic_name: str
    doctor_name: str
    doctor_credentials: tuple[str, ...]
    contact: Contact
    business_hours: tuple[tuple[str, str], ...]
    appointment_policy: AppointmentPolicy
    services: tuple[ServiceCategory, ...]
    overview: str = ""
    target_patients: tuple[tuple[str, str], ...] = field(default=())
    hospital_affiliations: tuple[str, ...] = field(default=())

    def hours_for(self, day: str) -> str:
        return dict(self.business_hours).get(day.lower(), "")

    def service_by_category(self, category: str) -> list[str]:
        """Items of the first category whose name contains ``category`` (case-insensitive)."""
        needle = category.lower()
        for service in self.services:
            if needle in service.category.lower():
                return list(service.items)
        return []

    def contact_info(self) -> dict[str, str]:
        return {
            "phone": self.contact.phone,
            "address": self.contact.address,
            "hours": self.hours_for("monday"),
        }

    def system_prompt(self) -> str:
        services = "\n- ".join(
            f"{s.category}: {', '.join(s.items)}" for s in self.services
        )
        hours = "\n- ".join(f"{day}: {hours}" for day, hours in self.business_hours)
        policy = self.appointment_policy
        return f"""Eres el agente virtual del {self.clinic_name}, dirigido por el {self.doctor_name}.

INFORMACIÓN ESPECÍFICA DEL CENTRO:
- Nombre: {self.clinic_name}
- Doctor: {self.doctor_name} - {', '.join(self.doctor_credentials)}
- Ubicación: {self.contact.address}
- Teléfono: {self.contact.phone}
- Fax: {self.contact.fax}

HORARIOS DE ATENCIÓN:
- {hours}

SERVICIOS DISPONIBLES:
- {services}

INFORMACIÓN DE CITAS:
- Método de reserva: {policy.booking_method}
- Acepta nuevos pacientes: {'Sí' if policy.accepts_new_patients else 'No'}
- Seguros aceptados: {', '.join(policy.insurance)}
- Emergencias: {policy.after_hours}

INSTRUCCIONES ESPECÍFICAS:
- IMPORTANTE: SIEMPRE responde en ESPAÑOL
- Solo responde preguntas sobre servicios otológicos y del centro
- Si te preguntan algo fuera del tema médico otológico, di: "Lo siento, solo puedo ayudarte con información sobre nuestros servicios otológicos"
- Usa esta información para dar respuestas naturales en español, nunca JSON literal
- NO agregues preguntas, sugerencias, o frases adicionales
- NO agregues "Feel free to ask" ni frases en inglés
- NO agregues "¿Hay algo más en lo que pueda ayudarte?" ni frases similares
- El sistema agregará automáticamente las opciones de seguimiento después de tu respuesta
- Para horarios: si todos los días laborales tienen el mismo horario, di "De lunes a viernes de [hora] a [hora]" en lugar de listar cada día
- Para horarios: siempre menciona que sábados y domingos están cerrados
- Para contacto: da el teléfono y la dirección en formato natural, no como lista
- Respuestas breves: esto es una llamada telefónica"""


CENTRO_OTOLOGICO = ClinicKnowledgeBase(
    clinic_name="Centro Otológico de Puerto Rico",
    doctor_name="Dr. Miguel A. Lasalle López",
    doctor_credentials=(
        "MD",
        "Board-Certified Otolaryngologist",
        "Fellowship-trained Otologist/Neurotologist",
    ),
    overview=(
        "Centro Otológico de Puerto Rico is the leading otorhinolaryngology clinic "
        "in western Puerto Rico, founded in 2002."
    ),
    contact=Contact(
        address="55 Calle De Diego Este, Suite 105, CPR Professional Building, Mayagüez, PR 00680",
        phone="(787) 833-2155",
        fax="(787) 833-2680",
        website="https://centrootologicopr.com",
    ),
    business_hours=(
        ("monday", "8:00 am – 5:00 pm"),
        ("tuesday", "8:00 am – 5:00 pm"),
        ("wednesday", "8:00 am – 5:00 pm"),
        ("thursday", "8:00 am – 5:00 pm"),
        ("friday", "8:00 am – 5:00 pm"),
        ("saturday", "Closed"),
        ("sunday", "Closed"),
    ),
    appointment_policy=AppointmentPolicy(
        booking_method="Call the office to schedule. Online booking currently unavailable.",
        accepts_new_patients=True,
        insurance=("Most major plans", "Medicare", "Medicaid"),
        walk_ins="Not typical; please call for urgent cases.",
        after_hours="For emergencies, visit the nearest ER or call the office for instructions.",
    ),
    services=(
        ServiceCategory("Diagnostics", (
            "Comprehensive ENT evaluation",
            "Audiological testing (hearing evaluations)",
            "Vestibular & balance testing",
        )),
        ServiceCategory("Hearing Rehabilitation", (
            "Hearing aid fitting & programming",
            "Cochlear implant",
            "Bone-anchored hearing devices",
            "Aural rehabilitation & counseling",
        )),
        ServiceCategory("Medical Treatments", (
            "Sinus & allergy management",
            "Pediatric ENT care (ear infections, tonsillitis)",
            "Tinnitus evaluation & treatment",
        )),
        ServiceCategory("Surgical Interventions", (
            "Cochlear implant surgery & programming",
            "Tympanoplasty & mastoidectomy",
            "Stapedectomy & cholesteatoma removal",
            "Functional endoscopic sinus surgery (FESS)",
            "Tonsillectomy & adenoidectomy",
        )),
        ServiceCategory("Balance Disorder Management", (
            "Vertigo & Ménière's disease evaluation",
            "Medical management & vestibular rehab referrals",
        )),
    ),
    target_patients=(
        ("infants_children", "Congenital hearing loss, chronic ear infections, tonsil & adenoid disorders."),
        ("adults", "Hearing loss, sinus & allergy issues, balance disorders, sleep-related breathing problems."),
        ("seniors", "Age-related hearing loss, chronic ear disease, dizziness & fall-risk assessment."),
    ),
    hospital_affiliations=(
        "Mayagüez Medical Center – Dr. Ramón E. Betances Hospital",
        "Hospital Perea, Mayagüez",
        "Hospital San Antonio, Mayagüez",
    ),
)
